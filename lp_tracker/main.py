#!/usr/bin/env python3
"""
LP Tracker Service - Main entry point

Runs either the command listener, which serves add_player and list_players
commands arriving on the message bus, or the poller, which refreshes the
ranked stats of every tracked player on a fixed interval.
"""
import argparse
import asyncio
import logging
import signal
import sys

import structlog

from lp_tracker.config import Config
from lp_tracker.service import LPTrackerService, ServiceMode


logger = logging.getLogger(__name__)


def configure_logging(config: Config) -> None:
    """Set up stdlib logging and the structlog renderer used by the adapters."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Set httpx and httpcore loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    renderer = (
        structlog.processors.JSONRenderer()
        if config.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level.upper())
        ),
    )


async def main(mode: ServiceMode = ServiceMode.COMMANDS):
    """Main entry point for the LP Tracker service.

    Args:
        mode: Run the command listener or the poller
    """
    config = Config.from_env()
    configure_logging(config)

    logger.info(f"Starting LP Tracker service ({mode.value})")

    service = LPTrackerService(config, mode=mode)

    # Handle graceful shutdown
    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()

    def signal_handler(sig):
        logger.info(f"Received signal {sig.name}, shutting down gracefully...")
        main_task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler, sig)

    try:
        await service.start()
    except asyncio.CancelledError:
        logger.info("Service cancelled, shutting down...")
    except Exception as e:
        logger.error(f"Service failed with error: {e}")
        sys.exit(1)
    finally:
        await service.stop()


def cli():
    parser = argparse.ArgumentParser(description="LP Tracker Service")
    parser.add_argument(
        "--poller",
        action="store_true",
        help="Run the rank poller instead of the command listener",
    )
    args = parser.parse_args()

    asyncio.run(main(ServiceMode.POLLER if args.poller else ServiceMode.COMMANDS))


if __name__ == "__main__":
    cli()
