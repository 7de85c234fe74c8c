"""Tracking service: registers players and keeps their ranked stats fresh."""

import asyncio
import logging
from typing import List, Optional

from ..adapters.database.manager import DatabaseManager, DuplicatePlayerError
from ..adapters.riot_api.client import RiotAPIClient, RiotAPIError, SummonerNotFoundError
from ..core.entities import Player
from ..core.enums import Server
from ..core.errors import (
    AlreadyTrackedError,
    LookupFailedError,
    PlayerNotFoundError,
    RefreshError,
    RefreshFailure,
)

logger = logging.getLogger(__name__)


class PlayerService:
    """Business operations on tracked players.

    Translates adapter errors into the tracking error taxonomy so callers
    never have to know about the Riot client or the database.
    """

    def __init__(
        self,
        database: DatabaseManager,
        riot_api: RiotAPIClient,
        refresh_pacing_seconds: float = 1.0,
        metrics=None,
    ):
        """Initialize the tracking service.

        Args:
            database: Directory of tracked players
            riot_api: Riot API client used for lookups
            refresh_pacing_seconds: Delay between two player updates in refresh_all
            metrics: Optional MetricsProvider recording refresh batches
        """
        self.database = database
        self.riot_api = riot_api
        self.refresh_pacing_seconds = refresh_pacing_seconds
        self.metrics = metrics

    @staticmethod
    def normalize_server(server: str) -> str:
        """Map aliases such as "euw" to their platform value, keep unknown input as is."""
        resolved = Server.from_string(server)
        return resolved.value if resolved else server.strip().lower()

    async def add_player(self, game_name: str, tag_line: str, server: str) -> Player:
        """Start tracking a player.

        Raises:
            AlreadyTrackedError: If the Riot ID is already tracked on that server
            PlayerNotFoundError: If the Riot API knows no such player
            LookupFailedError: For any other Riot API failure
        """
        server = self.normalize_server(server)

        # Advisory only, the unique index arbitrates concurrent adds
        if await self.database.player_exists(game_name, tag_line, server):
            raise AlreadyTrackedError(game_name, tag_line, server)

        try:
            player = await self.riot_api.get_player_by_riot_id(game_name, tag_line, server)
        except SummonerNotFoundError as e:
            raise PlayerNotFoundError(f"failed to fetch player data: {e}") from e
        except RiotAPIError as e:
            raise LookupFailedError(f"failed to fetch player data: {e}") from e

        try:
            created = await self.database.create_player(player)
        except DuplicatePlayerError as e:
            raise AlreadyTrackedError(game_name, tag_line, server) from e

        logger.info(f"Started tracking {created.riot_id} on {created.server} ({created.tier} {created.rank})")
        return created

    async def get_all_players(self) -> List[Player]:
        """Every tracked player."""
        return await self.database.get_all_players()

    async def get_player_by_riot_id(self, game_name: str, tag_line: str, server: str) -> Optional[Player]:
        return await self.database.get_player_by_riot_id(game_name, tag_line, self.normalize_server(server))

    async def update_player(self, player: Player) -> Player:
        """Fetch fresh ranked data for one player and persist it.

        Raises:
            PlayerNotFoundError: If the summoner disappeared from the Riot API
            LookupFailedError: For any other Riot API failure
        """
        try:
            await self.riot_api.update_player_rank(player)
        except SummonerNotFoundError as e:
            raise PlayerNotFoundError(f"failed to get summoner: {e}") from e
        except RiotAPIError as e:
            raise LookupFailedError(f"failed to update rank: {e}") from e

        return await self.database.update_player(player)

    async def refresh_all(self) -> List[Player]:
        """Update every tracked player in turn, pausing between players.

        Players that fail are skipped and reported together once the batch
        is done; the others are persisted regardless.

        Returns:
            The players that were updated

        Raises:
            RefreshError: If at least one player failed to update
        """
        players = await self.database.get_all_players()
        updated: List[Player] = []
        failures: List[RefreshFailure] = []

        for index, player in enumerate(players):
            try:
                updated.append(await self.update_player(player))
            except Exception as e:
                logger.warning(f"Failed to update player {player.riot_id}: {e}")
                failures.append(RefreshFailure(player=player, error=e))

            if index < len(players) - 1 and self.refresh_pacing_seconds > 0:
                await asyncio.sleep(self.refresh_pacing_seconds)

        if self.metrics:
            self.metrics.record_refresh_iteration(failed_players=len(failures))

        logger.info(f"Refreshed {len(updated)}/{len(players)} players")

        if failures:
            raise RefreshError(failures)
        return updated
