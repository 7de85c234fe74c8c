"""Messaging infrastructure for LP Tracker service."""

from .nats_client import NATSMessageBusClient, MessageBusClient
from .command_listener import CommandListener, InvalidCommandMessage, decode_command

__all__ = [
    "NATSMessageBusClient",
    "MessageBusClient",
    "CommandListener",
    "InvalidCommandMessage",
    "decode_command",
]
