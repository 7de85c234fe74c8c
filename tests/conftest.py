"""Shared pytest fixtures for LP Tracker tests."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add the parent directory to the path if not already there
# This ensures the lp_tracker module can be imported in CI
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from lp_tracker.config import Config, Environment
from lp_tracker.adapters.database.manager import DatabaseManager
from lp_tracker.adapters.riot_api.client import RiotAPIClient
from lp_tracker.application.player_service import PlayerService


@pytest.fixture
def test_config(tmp_path):
    """Configuration pointing at a throwaway SQLite database."""
    return Config(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'lp_tracker.db'}",
        riot_api_key="test-api-key",
        environment=Environment.CI,
        refresh_pacing_seconds=0,
    )


@pytest_asyncio.fixture
async def database_manager(test_config):
    """Initialized database manager with the schema created."""
    manager = DatabaseManager(test_config)
    await manager.initialize()
    await manager.create_tables()

    yield manager

    await manager.close()


@pytest_asyncio.fixture
async def riot_api_client():
    """Riot API client without request spacing, for mocked HTTP."""
    client = RiotAPIClient("test-api-key", min_request_interval=0)
    yield client
    await client.close()


@pytest_asyncio.fixture
async def player_service(database_manager, riot_api_client):
    """Tracking service over the test database and the mocked Riot API."""
    return PlayerService(database_manager, riot_api_client, refresh_pacing_seconds=0)
