"""Database infrastructure layer for tracked players."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, List, Optional, Tuple

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from ...config import Config
from ...core.entities import Player
from .models import Base, TrackedPlayer as TrackedPlayerModel

logger = logging.getLogger(__name__)


class DuplicatePlayerError(Exception):
    """A player with the same Riot ID and server, or the same PUUID, already exists."""

    def __init__(self, player: Player):
        self.player = player
        super().__init__(f"player {player.riot_id} ({player.server}) already exists")


class DatabaseManager:
    """Manages database connection and provides direct repository methods."""

    def __init__(self, config: Config):
        self.config = config
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def initialize(self) -> None:
        """Initialize database engine and session factory."""
        if self._engine is not None:
            logger.warning("Database manager already initialized")
            return

        self._engine = create_async_engine(
            self.config.get_database_url(),
            echo=self.config.log_level == "DEBUG",
            poolclass=NullPool,
            pool_pre_ping=True,
        )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info("Database manager initialized successfully")

    async def close(self) -> None:
        """Close database engine and clean up resources."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database manager closed")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session with automatic cleanup."""
        if self._session_factory is None:
            raise RuntimeError(
                "Database manager not initialized. Call initialize() first."
            )

        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Create all tables from the models. Production schemas go through alembic."""
        if self._engine is None:
            raise RuntimeError(
                "Database manager not initialized. Call initialize() first."
            )
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Check that the database answers queries."""
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    # Conversion methods
    def _convert_db_player_to_core_entity(self, player_record: TrackedPlayerModel) -> Player:
        """Convert database TrackedPlayer model to core Player entity."""
        return Player(
            puuid=player_record.puuid,
            game_name=player_record.game_name,
            tag_line=player_record.tag_line,
            server=player_record.server,
            summoner_id=player_record.summoner_id,
            summoner_level=player_record.summoner_level,
            profile_icon_id=player_record.profile_icon_id,
            tier=player_record.tier,
            rank=player_record.rank,
            league_points=player_record.league_points,
            wins=player_record.wins,
            losses=player_record.losses,
            id=player_record.id,
            created_at=player_record.created_at,
            updated_at=player_record.updated_at,
        )

    def _copy_player_fields(self, player: Player, player_record: TrackedPlayerModel) -> None:
        player_record.puuid = player.puuid
        player_record.game_name = player.game_name
        player_record.tag_line = player.tag_line
        player_record.server = player.server
        player_record.summoner_id = player.summoner_id
        player_record.summoner_level = player.summoner_level
        player_record.profile_icon_id = player.profile_icon_id
        player_record.tier = player.tier
        player_record.rank = player.rank
        player_record.league_points = player.league_points
        player_record.wins = player.wins
        player_record.losses = player.losses

    # Player repository methods
    async def create_player(self, player: Player) -> Player:
        """Insert a new tracked player.

        Raises:
            DuplicatePlayerError: If the Riot ID on that server or the PUUID is
                already tracked
        """
        now = datetime.utcnow()
        async with self.get_session() as session:
            player_record = TrackedPlayerModel(created_at=now, updated_at=now)
            self._copy_player_fields(player, player_record)
            session.add(player_record)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.info(f"Duplicate player rejected by unique index: {player.riot_id} ({player.server})")
                raise DuplicatePlayerError(player) from e
            await session.refresh(player_record)
            return self._convert_db_player_to_core_entity(player_record)

    async def get_player_by_riot_id(self, game_name: str, tag_line: str, server: str) -> Optional[Player]:
        """Get a tracked player by Riot ID on a server."""
        async with self.get_session() as session:
            # Case-insensitive comparison for game_name and tag_line
            result = await session.execute(
                select(TrackedPlayerModel).where(
                    func.lower(TrackedPlayerModel.game_name) == game_name.lower(),
                    func.lower(TrackedPlayerModel.tag_line) == tag_line.lower(),
                    TrackedPlayerModel.server == server,
                )
            )
            player_record = result.scalar_one_or_none()
            return self._convert_db_player_to_core_entity(player_record) if player_record else None

    async def get_player_by_puuid(self, puuid: str) -> Optional[Player]:
        """Get a tracked player by PUUID."""
        async with self.get_session() as session:
            result = await session.execute(
                select(TrackedPlayerModel).where(TrackedPlayerModel.puuid == puuid)
            )
            player_record = result.scalar_one_or_none()
            return self._convert_db_player_to_core_entity(player_record) if player_record else None

    async def update_player(self, player: Player) -> Player:
        """Persist every field of an existing player and bump updated_at.

        Raises:
            ValueError: If the player has no id or no longer exists
        """
        if player.id is None:
            raise ValueError("Cannot update a player without an id")

        async with self.get_session() as session:
            player_record = await session.get(TrackedPlayerModel, player.id)
            if player_record is None:
                raise ValueError(f"Player {player.id} not found")

            self._copy_player_fields(player, player_record)
            player_record.updated_at = datetime.utcnow()
            await session.commit()
            await session.refresh(player_record)
            return self._convert_db_player_to_core_entity(player_record)

    async def get_all_players(self) -> List[Player]:
        """Get all tracked players."""
        async with self.get_session() as session:
            result = await session.execute(
                select(TrackedPlayerModel).order_by(TrackedPlayerModel.id)
            )
            player_records = result.scalars().all()
            return [self._convert_db_player_to_core_entity(p) for p in player_records]

    async def get_players_page(self, page: int = 1, limit: int = 20) -> Tuple[List[Player], int]:
        """Get one page of tracked players, newest first.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            The players of the page and the total number of tracked players
        """
        page = max(page, 1)
        limit = max(limit, 1)

        async with self.get_session() as session:
            total = await session.scalar(select(func.count()).select_from(TrackedPlayerModel))
            result = await session.execute(
                select(TrackedPlayerModel)
                .order_by(TrackedPlayerModel.created_at.desc(), TrackedPlayerModel.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            player_records = result.scalars().all()
            return [self._convert_db_player_to_core_entity(p) for p in player_records], total or 0

    async def get_players_by_server(self, server: str) -> List[Player]:
        """Get all tracked players of one server."""
        async with self.get_session() as session:
            result = await session.execute(
                select(TrackedPlayerModel)
                .where(TrackedPlayerModel.server == server)
                .order_by(TrackedPlayerModel.id)
            )
            return [self._convert_db_player_to_core_entity(p) for p in result.scalars().all()]

    async def player_exists(self, game_name: str, tag_line: str, server: str) -> bool:
        """Check whether a Riot ID is tracked on a server."""
        return await self.get_player_by_riot_id(game_name, tag_line, server) is not None

    async def delete_player(self, player_id: int) -> bool:
        """Delete a tracked player."""
        async with self.get_session() as session:
            result = await session.execute(
                delete(TrackedPlayerModel).where(TrackedPlayerModel.id == player_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def delete_player_by_riot_id(self, game_name: str, tag_line: str, server: str) -> bool:
        """Delete a tracked player by Riot ID on a server."""
        async with self.get_session() as session:
            result = await session.execute(
                delete(TrackedPlayerModel).where(
                    func.lower(TrackedPlayerModel.game_name) == game_name.lower(),
                    func.lower(TrackedPlayerModel.tag_line) == tag_line.lower(),
                    TrackedPlayerModel.server == server,
                )
            )
            await session.commit()
            return result.rowcount > 0
