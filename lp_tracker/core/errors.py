"""Domain errors raised by the tracking service."""

from dataclasses import dataclass
from typing import List

from .entities import Player
from .enums import ErrorKind


class TrackingError(Exception):
    """Base exception for tracking operations.

    Every tracking error carries an ErrorKind so callers can classify it
    without inspecting the message.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE


class AlreadyTrackedError(TrackingError):
    """A player with the same identity is already tracked."""

    kind = ErrorKind.ALREADY_TRACKED

    def __init__(self, game_name: str, tag_line: str, server: str):
        self.game_name = game_name
        self.tag_line = tag_line
        self.server = server
        super().__init__(f"player {game_name}#{tag_line} ({server}) is already being tracked")


class LookupFailedError(TrackingError):
    """Fetching the player from the Riot API failed."""

    kind = ErrorKind.UPSTREAM_FAILURE


class PlayerNotFoundError(LookupFailedError):
    """The Riot API has no account matching the requested identity."""

    kind = ErrorKind.NOT_FOUND


@dataclass
class RefreshFailure:
    """A player that could not be refreshed and why."""

    player: Player
    error: Exception

    def __str__(self) -> str:
        return f"Failed to update player {self.player.riot_id}: {self.error}"


class RefreshError(TrackingError):
    """Some players failed to update during a refresh batch."""

    def __init__(self, failures: List[RefreshFailure]):
        self.failures = failures
        super().__init__(f"some players failed to update: {[str(f) for f in failures]}")

    @property
    def failed_players(self) -> List[Player]:
        return [failure.player for failure in self.failures]
