"""Inbound command transport over NATS."""

import json
from typing import Any, Optional, Tuple

import structlog

from ...application.command_handler import CommandHandler
from ...application.commands import CommandInvocation, CommandResponse
from .nats_client import MessageBusClient

logger = structlog.get_logger()


class InvalidCommandMessage(ValueError):
    """A command message could not be decoded."""

    pass


def decode_command(data: bytes) -> Tuple[CommandInvocation, Optional[str]]:
    """Decode a command message payload.

    Payload format: ``{"command": str, "options": dict, "reply_subject": str}``,
    where ``options`` and ``reply_subject`` are optional.

    Returns:
        The invocation and the reply subject carried by the payload, if any

    Raises:
        InvalidCommandMessage: If the payload is not a valid command
    """
    try:
        payload = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidCommandMessage(f"payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidCommandMessage("payload must be a JSON object")

    name = payload.get("command")
    if not isinstance(name, str) or not name:
        raise InvalidCommandMessage("missing command name")

    options = payload.get("options") or {}
    if not isinstance(options, dict):
        raise InvalidCommandMessage("options must be a JSON object")

    reply_subject = payload.get("reply_subject") or None
    return CommandInvocation(name=name, options=options), reply_subject


class CommandListener:
    """Feeds NATS command messages to the command handler and publishes the responses."""

    def __init__(
        self,
        message_bus: MessageBusClient,
        command_handler: CommandHandler,
        commands_subject: str = "lp_tracker.commands",
        stats_subject: str = "lp_tracker.stats",
        queue_group: str = "lp_tracker",
    ):
        self.message_bus = message_bus
        self.command_handler = command_handler
        self.commands_subject = commands_subject
        self.stats_subject = stats_subject
        self.queue_group = queue_group

    async def start(self) -> None:
        """Subscribe to the command and statistics subjects."""
        await self.message_bus.subscribe(
            self.commands_subject, self.handle_command_message, queue=self.queue_group
        )
        await self.message_bus.subscribe(
            self.stats_subject, self.handle_stats_message, queue=self.queue_group
        )
        logger.info(
            "Command listener started",
            commands_subject=self.commands_subject,
            stats_subject=self.stats_subject,
        )

    async def stop(self) -> None:
        """Stop taking new commands; already received messages are still dispatched."""
        await self.message_bus.unsubscribe(self.commands_subject)
        await self.message_bus.unsubscribe(self.stats_subject)
        logger.info("Command listener stopped")

    async def handle_command_message(self, msg: Any) -> None:
        """Decode one command message and dispatch it without waiting for its result."""
        try:
            invocation, reply_subject = decode_command(msg.data)
        except InvalidCommandMessage as e:
            logger.warning("Dropping malformed command message", error=str(e))
            return

        reply_subject = reply_subject or getattr(msg, "reply", None) or None

        async def respond(response: CommandResponse) -> None:
            if not reply_subject:
                logger.info(
                    "No reply subject for command response",
                    command=response.command,
                    outcome=response.outcome.value,
                )
                return
            await self.message_bus.publish(reply_subject, json.dumps(response.to_dict()).encode())

        task = self.command_handler.dispatch(invocation, respond)
        if task is None:
            logger.debug("Unknown command dropped", command=invocation.name)

    async def handle_stats_message(self, msg: Any) -> None:
        """Answer a status query with the current command statistics."""
        reply_subject = getattr(msg, "reply", None)
        if not reply_subject:
            logger.warning("Stats request without reply subject")
            return

        snapshot = self.command_handler.get_stats()
        payload = {
            "total_commands": snapshot.total_commands,
            "active_commands": snapshot.active_commands,
            "average_duration_seconds": snapshot.average_duration,
        }
        await self.message_bus.publish(reply_subject, json.dumps(payload).encode())
