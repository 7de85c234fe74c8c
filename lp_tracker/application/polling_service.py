"""Periodic refresh of every tracked player's ranked stats."""

import logging
import asyncio
from typing import List, Optional

from ..core.entities import Player
from ..core.errors import RefreshError
from .player_service import PlayerService


logger = logging.getLogger(__name__)


class PollingService:
    """Runs refresh_all on a fixed interval, independently of user commands."""

    def __init__(self, player_service: PlayerService, poll_interval_seconds: int = 300):
        """Initialize the polling service.

        Args:
            player_service: Tracking service performing the refresh
            poll_interval_seconds: Delay between two refresh batches
        """
        self.player_service = player_service
        self.poll_interval_seconds = poll_interval_seconds

        # Polling state
        self._is_running = False
        self._polling_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._is_running

    async def start_polling(self) -> None:
        """Start the refresh loop."""
        if self._is_running:
            logger.warning("Polling is already running")
            return

        self._is_running = True
        self._polling_task = asyncio.create_task(self._polling_loop())

        logger.info(f"Started rank polling with {self.poll_interval_seconds}s intervals")

    async def stop_polling(self) -> None:
        """Stop the refresh loop."""
        if not self._is_running:
            logger.warning("Polling is not running")
            return

        self._is_running = False

        if self._polling_task and not self._polling_task.done():
            self._polling_task.cancel()
            try:
                await self._polling_task
            except asyncio.CancelledError:
                pass

        logger.info("Stopped rank polling")

    async def poll_once(self) -> List[Player]:
        """Execute a single refresh batch.

        Players that failed to update are logged, they do not stop the batch.

        Returns:
            Players updated during this batch
        """
        try:
            updated = await self.player_service.refresh_all()
        except RefreshError as e:
            for failure in e.failures:
                logger.warning(str(failure))
            logger.error(f"Refresh finished with {len(e.failures)} failed players")
            return []

        logger.info(f"Refresh cycle updated {len(updated)} players")
        return updated

    async def _polling_loop(self) -> None:
        """Main polling loop that runs continuously."""
        logger.info("Rank polling loop started")

        while self._is_running:
            try:
                await self.poll_once()
                await asyncio.sleep(self.poll_interval_seconds)

            except asyncio.CancelledError:
                logger.info("Polling loop cancelled")
                break
            except Exception as e:
                logger.error(f"Error in polling loop: {e}")
                # Wait before retrying on error
                await asyncio.sleep(min(self.poll_interval_seconds, 30))

        logger.info("Rank polling loop stopped")
