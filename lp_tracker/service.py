"""Main service class for LP Tracker."""

import asyncio
import logging
from enum import Enum
from typing import Optional

from lp_tracker.config import Config
from lp_tracker.adapters.database.manager import DatabaseManager
from lp_tracker.adapters.messaging import CommandListener, MessageBusClient, NATSMessageBusClient
from lp_tracker.adapters.observability import initialize_metrics, shutdown_metrics
from lp_tracker.adapters.riot_api.client import RiotAPIClient
from lp_tracker.application.command_handler import CommandHandler
from lp_tracker.application.command_stats import CommandStats
from lp_tracker.application.player_service import PlayerService
from lp_tracker.application.polling_service import PollingService


logger = logging.getLogger(__name__)


class ServiceMode(Enum):
    """What the process runs: the command listener or the rank poller."""

    COMMANDS = "commands"
    POLLER = "poller"


class LPTrackerService:
    """Wires the infrastructure components and runs one of the service modes.

    The command listener and the poller run as separate processes sharing the
    database and the Riot API key.
    """

    def __init__(
        self,
        config: Config,
        mode: ServiceMode = ServiceMode.COMMANDS,
        message_bus_client: Optional[MessageBusClient] = None,
    ):
        """Initialize the LP Tracker service.

        Args:
            config: Service configuration
            mode: Which loop this process runs
            message_bus_client: Optional message bus client for dependency injection.
                               If not provided, will create NATSMessageBusClient from config.
        """
        self.config = config
        self.mode = mode
        self._running = False
        self._stopped = False

        # Infrastructure components
        self._database_manager: Optional[DatabaseManager] = None
        self._message_bus_client: Optional[MessageBusClient] = None
        self._riot_api_client: Optional[RiotAPIClient] = None
        self._metrics_provider = None

        # Application components
        self._player_service: Optional[PlayerService] = None
        self._command_handler: Optional[CommandHandler] = None
        self._command_listener: Optional[CommandListener] = None
        self._polling_service: Optional[PollingService] = None

        # Provided dependencies
        self._provided_message_bus_client = message_bus_client

    @property
    def command_handler(self) -> Optional[CommandHandler]:
        return self._command_handler

    async def start(self):
        """Start the LP Tracker service and block until stopped."""
        logger.info(f"Starting LP Tracker service in {self.mode.value} mode")
        self._running = True

        try:
            await self._initialize_infrastructure()

            if self.mode == ServiceMode.POLLER:
                await self._polling_service.start_polling()
            else:
                await self._command_listener.start()

            # Main service loop - handles health checks
            while self._running:
                if self._message_bus_client and not await self._message_bus_client.is_connected():
                    logger.warning("Message bus connection lost, attempting to reconnect...")
                    try:
                        await self._message_bus_client.connect()
                        await self._command_listener.start()
                        logger.info("Message bus reconnection successful")
                    except Exception as e:
                        logger.error(f"Failed to reconnect to message bus: {e}")

                await asyncio.sleep(min(self.config.poll_interval_seconds, 30))

        except Exception:
            self._running = False
            raise

    async def stop(self):
        """Stop the LP Tracker service."""
        if self._stopped:
            return
        self._stopped = True

        logger.info("Stopping LP Tracker service")
        self._running = False

        if self._polling_service and self._polling_service.is_running:
            try:
                await self._polling_service.stop_polling()
            except Exception as e:
                logger.error(f"Error stopping polling service: {e}")

        if self._command_listener:
            try:
                await self._command_listener.stop()
            except Exception as e:
                logger.error(f"Error stopping command listener: {e}")

        # Let commands in progress emit their responses, never cancel them
        if self._command_handler:
            try:
                await asyncio.wait_for(
                    asyncio.shield(self._command_handler.drain()),
                    timeout=max(self._command_handler.timeouts.values()),
                )
            except asyncio.TimeoutError:
                logger.warning("Timed out waiting for in-flight commands")

        await self._cleanup_infrastructure()

        logger.info("LP Tracker service stopped")

    async def _initialize_infrastructure(self) -> None:
        """Initialize all infrastructure components."""
        logger.info("Initializing infrastructure components")

        # Initialize metrics provider first
        self._metrics_provider = initialize_metrics(self.config)

        # Initialize database
        self._database_manager = DatabaseManager(self.config)
        await self._database_manager.initialize()
        if not await self._database_manager.ping():
            raise RuntimeError("Database is not reachable")

        # Initialize Riot API client
        self._riot_api_client = RiotAPIClient(
            self.config.riot_api_key,
            base_url=self.config.riot_api_url,
            account_base_url=self.config.riot_account_api_url,
            request_timeout=self.config.riot_api_timeout_seconds,
            metrics=self._metrics_provider,
        )
        logger.info(f"Using Riot API at: {self.config.riot_api_url or 'platform hosts'}")

        self._player_service = PlayerService(
            database=self._database_manager,
            riot_api=self._riot_api_client,
            refresh_pacing_seconds=self.config.refresh_pacing_seconds,
            metrics=self._metrics_provider,
        )

        if self.mode == ServiceMode.POLLER:
            self._polling_service = PollingService(
                self._player_service,
                poll_interval_seconds=self.config.poll_interval_seconds,
            )
            logger.info("Infrastructure initialization completed")
            return

        self._command_handler = CommandHandler(
            self._player_service,
            stats=CommandStats(),
            pool_size=self.config.command_worker_pool_size,
            timeouts=self.config.get_command_timeouts(),
            metrics=self._metrics_provider,
        )

        # Initialize message bus
        if self._provided_message_bus_client is not None:
            self._message_bus_client = self._provided_message_bus_client
        else:
            self._message_bus_client = NATSMessageBusClient(
                servers=self.config.message_bus_url,
                timeout=self.config.message_bus_timeout_seconds,
                max_reconnect_attempts=self.config.message_bus_max_reconnect_attempts,
                reconnect_delay=self.config.message_bus_reconnect_delay_seconds,
            )

        await self._message_bus_client.connect()

        if not await self._message_bus_client.is_connected():
            raise RuntimeError("Failed to connect to message bus")

        self._command_listener = CommandListener(
            self._message_bus_client,
            self._command_handler,
            commands_subject=self.config.commands_subject,
            stats_subject=self.config.stats_subject,
            queue_group=self.config.commands_queue_group,
        )

        logger.info("Infrastructure initialization completed")

    async def _cleanup_infrastructure(self) -> None:
        """Clean up all infrastructure components."""
        logger.info("Cleaning up infrastructure components")

        # Close message bus connection
        if self._message_bus_client:
            try:
                await self._message_bus_client.disconnect()
            except Exception as e:
                logger.error(f"Error during message bus disconnect: {e}")

        # Close Riot API client
        if self._riot_api_client:
            await self._riot_api_client.close()

        # Close database connection
        if self._database_manager:
            try:
                await self._database_manager.close()
            except Exception as e:
                logger.error(f"Error during database disconnect: {e}")

        shutdown_metrics()

        logger.info("Infrastructure cleanup completed")
