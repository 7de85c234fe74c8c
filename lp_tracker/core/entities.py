"""Core entities for the lp-tracker service."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import UNRANKED_TIER


@dataclass
class RankedStats:
    """Ranked Solo/Duo standing of a player."""

    tier: str = UNRANKED_TIER
    rank: str = ""
    league_points: int = 0
    wins: int = 0
    losses: int = 0

    @classmethod
    def unranked(cls) -> "RankedStats":
        """Stats for a player without a Solo/Duo entry."""
        return cls()

    @classmethod
    def from_league_entry(cls, entry: dict) -> "RankedStats":
        """Build stats from a Riot league entry payload."""
        return cls(
            tier=entry.get("tier", UNRANKED_TIER),
            rank=entry.get("rank", ""),
            league_points=entry.get("leaguePoints", 0),
            wins=entry.get("wins", 0),
            losses=entry.get("losses", 0),
        )


@dataclass
class Player:
    """Represents a tracked League of Legends player.

    A player is identified by its Riot ID on a given server
    (game_name, tag_line, server) and by the provider-issued PUUID.
    """

    puuid: str
    game_name: str
    tag_line: str
    server: str

    # Summoner information
    summoner_id: str = ""
    summoner_level: int = 0
    profile_icon_id: int = 0

    # Ranked Solo/Duo information
    tier: str = UNRANKED_TIER
    rank: str = ""
    league_points: int = 0
    wins: int = 0
    losses: int = 0

    # Tracking metadata
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Database ID
    id: Optional[int] = None

    @property
    def riot_id(self) -> str:
        """Get the player's Riot ID in game_name#tag_line format."""
        return f"{self.game_name}#{self.tag_line}"

    @property
    def is_ranked(self) -> bool:
        return self.tier != UNRANKED_TIER

    @property
    def winrate(self) -> int:
        """Winrate percentage over ranked games, 0 without games."""
        total_games = self.wins + self.losses
        return int((self.wins / total_games) * 100) if total_games > 0 else 0

    def apply_ranked_stats(self, stats: RankedStats) -> None:
        """Overwrite the ranked fields with fresh stats."""
        self.tier = stats.tier
        self.rank = stats.rank
        self.league_points = stats.league_points
        self.wins = stats.wins
        self.losses = stats.losses

    def __str__(self) -> str:
        """String representation of the player."""
        return f"Player({self.riot_id} on {self.server})"
