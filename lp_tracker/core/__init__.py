"""Core domain layer of the lp-tracker service."""

from .entities import Player, RankedStats
from .enums import CommandName, ErrorKind, Outcome, QueueType, Server, UNRANKED_TIER
from .errors import (
    AlreadyTrackedError,
    LookupFailedError,
    PlayerNotFoundError,
    RefreshError,
    RefreshFailure,
    TrackingError,
)

__all__ = [
    # Entities
    "Player",
    "RankedStats",
    # Enums
    "CommandName",
    "ErrorKind",
    "Outcome",
    "QueueType",
    "Server",
    "UNRANKED_TIER",
    # Errors
    "AlreadyTrackedError",
    "LookupFailedError",
    "PlayerNotFoundError",
    "RefreshError",
    "RefreshFailure",
    "TrackingError",
]
