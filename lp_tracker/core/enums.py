"""Core enums for the lp-tracker service."""

from enum import Enum
from typing import Optional


class Server(Enum):
    """League of Legends platform servers players can be tracked on.

    Each server contains:
    - value: Riot platform routing value
    - label: Human readable name shown to users
    - aliases: Short names users commonly type instead of the platform value
    """

    # Format: (platform_value, label, aliases)
    EUW1 = ("euw1", "EUW (Europe West)", ("euw",))
    EUN1 = ("eun1", "EUNE (Europe Nordic & East)", ("eune",))
    NA1 = ("na1", "NA (North America)", ("na",))
    KR = ("kr", "KR (Korea)", ())
    JP1 = ("jp1", "JP (Japan)", ("jp",))
    BR1 = ("br1", "BR (Brazil)", ("br",))
    LA1 = ("la1", "LAN (Latin America North)", ("lan",))
    LA2 = ("la2", "LAS (Latin America South)", ("las",))
    OC1 = ("oc1", "OCE (Oceania)", ("oce",))
    TR1 = ("tr1", "TR (Turkey)", ("tr",))
    RU = ("ru", "RU (Russia)", ())

    def __new__(cls, platform: str, label: str, aliases: tuple):
        obj = object.__new__(cls)
        obj._value_ = platform
        obj.label = label
        obj.aliases = aliases
        return obj

    @property
    def platform_host(self) -> str:
        """Base URL of the platform routed Riot API for this server."""
        return f"https://{self.value}.api.riotgames.com"

    @classmethod
    def from_string(cls, server: str) -> Optional["Server"]:
        """Resolve a platform value or alias, case-insensitively."""
        if not server:
            return None
        normalized = server.strip().lower()
        for member in cls:
            if normalized == member.value or normalized in member.aliases:
                return member
        return None


class QueueType(Enum):
    """Ranked queue types returned by the league entries endpoint."""

    RANKED_SOLO_5X5 = "RANKED_SOLO_5x5"
    RANKED_FLEX_SR = "RANKED_FLEX_SR"


class CommandName(Enum):
    """Commands the command handler knows how to execute."""

    ADD_PLAYER = "add_player"
    LIST_PLAYERS = "list_players"

    @classmethod
    def from_string(cls, name: str) -> Optional["CommandName"]:
        """Match a command name, returning None for unknown commands."""
        try:
            return cls(name)
        except ValueError:
            return None


class Outcome(Enum):
    """Outcome of an admitted command."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class ErrorKind(Enum):
    """User facing failure categories for tracking operations."""

    ALREADY_TRACKED = "already_tracked"
    NOT_FOUND = "not_found"
    UPSTREAM_FAILURE = "upstream_failure"


UNRANKED_TIER = "UNRANKED"
