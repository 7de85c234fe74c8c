"""SQLAlchemy models for LP Tracker service."""

from datetime import datetime

from sqlalchemy import (
    String,
    DateTime,
    Integer,
    Index,
)
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy.sql import func

Base = declarative_base()


class TrackedPlayer(Base):
    """Model for tracked League of Legends players and their ranked standing."""

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    puuid: Mapped[str] = mapped_column(String(78), nullable=False)
    game_name: Mapped[str] = mapped_column(String(16), nullable=False)
    tag_line: Mapped[str] = mapped_column(String(5), nullable=False)  # Tag line without # (e.g., "EUW")
    server: Mapped[str] = mapped_column(String(8), nullable=False)

    # Summoner information
    summoner_id: Mapped[str] = mapped_column(String(63), nullable=False, default="")
    summoner_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    profile_icon_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Ranked Solo/Duo standing
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default="UNRANKED")
    rank: Mapped[str] = mapped_column(String(5), nullable=False, default="")
    league_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Tracking metadata
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_players_server", "server"),
        # Unique constraints to prevent duplicate tracking
        Index("uq_players_riot_id_server", "game_name", "tag_line", "server", unique=True),
        Index("uq_players_puuid", "puuid", unique=True),
    )

    def __repr__(self) -> str:
        return f"<TrackedPlayer(game_name='{self.game_name}', tag_line='{self.tag_line}', server='{self.server}')>"
