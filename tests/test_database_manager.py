"""Integration tests for DatabaseManager against a SQLite database."""

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from lp_tracker.adapters.database.manager import DatabaseManager, DuplicatePlayerError
from tests.factories import PlayerFactory


@pytest.mark.integration
class TestDatabaseManagerLifecycle:
    """Test suite for session and engine management."""

    @pytest.mark.asyncio
    async def test_database_manager_initialization(self, test_config):
        """Test database manager initialization and cleanup."""
        manager = DatabaseManager(test_config)

        # Initially not initialized
        with pytest.raises(RuntimeError, match="not initialized"):
            async with manager.get_session():
                pass

        await manager.initialize()

        async with manager.get_session() as session:
            assert isinstance(session, AsyncSession)

        await manager.close()

        # Should not work after cleanup
        with pytest.raises(RuntimeError, match="not initialized"):
            async with manager.get_session():
                pass

    @pytest.mark.asyncio
    async def test_double_initialization_warning(self, test_config, caplog):
        """Test that double initialization logs a warning."""
        manager = DatabaseManager(test_config)

        await manager.initialize()
        await manager.initialize()

        assert "already initialized" in caplog.text

        await manager.close()

    @pytest.mark.asyncio
    async def test_session_context_manager(self, database_manager):
        """Test session context manager behavior."""
        async with database_manager.get_session() as session:
            result = await session.execute(text("SELECT 1"))
            assert result.scalar() == 1

    @pytest.mark.asyncio
    async def test_ping(self, database_manager):
        """Test that ping reports a reachable database."""
        assert await database_manager.ping() is True

    @pytest.mark.asyncio
    async def test_ping_without_initialization(self, test_config):
        """Test that ping reports failure instead of raising."""
        manager = DatabaseManager(test_config)
        assert await manager.ping() is False


@pytest.mark.integration
class TestPlayerRepository:
    """Test suite for the player repository methods."""

    @pytest.mark.asyncio
    async def test_create_player(self, database_manager):
        """Test inserting a player returns it with an id and timestamps."""
        player = PlayerFactory.create(game_name="Alice", tag_line="EUW", server="euw1")

        created = await database_manager.create_player(player)

        assert created.id is not None
        assert created.puuid == player.puuid
        assert created.riot_id == "Alice#EUW"
        assert created.server == "euw1"
        assert created.tier == "GOLD"
        assert created.created_at is not None
        assert created.updated_at is not None

    @pytest.mark.asyncio
    async def test_create_player_duplicate_riot_id_same_server(self, database_manager):
        """Test that the same Riot ID cannot be tracked twice on one server."""
        await database_manager.create_player(PlayerFactory.create(game_name="Bob", puuid="puuid_a"))

        with pytest.raises(DuplicatePlayerError):
            await database_manager.create_player(PlayerFactory.create(game_name="Bob", puuid="puuid_b"))

        assert len(await database_manager.get_all_players()) == 1

    @pytest.mark.asyncio
    async def test_create_player_duplicate_puuid(self, database_manager):
        """Test that a PUUID can only be tracked once."""
        await database_manager.create_player(PlayerFactory.create(game_name="Carol", puuid="same"))

        with pytest.raises(DuplicatePlayerError):
            await database_manager.create_player(
                PlayerFactory.create(game_name="Carol2", puuid="same")
            )

    @pytest.mark.asyncio
    async def test_same_riot_id_on_other_server_is_allowed(self, database_manager):
        """Test that uniqueness is scoped to the server."""
        await database_manager.create_player(
            PlayerFactory.create(game_name="Dave", server="euw1", puuid="p_euw")
        )
        await database_manager.create_player(
            PlayerFactory.create(game_name="Dave", server="na1", puuid="p_na")
        )

        assert len(await database_manager.get_all_players()) == 2

    @pytest.mark.asyncio
    async def test_get_player_by_riot_id_case_insensitive(self, database_manager):
        """Test Riot ID lookups ignore case of name and tag."""
        await database_manager.create_player(PlayerFactory.create(game_name="Eve", tag_line="EUW"))

        found = await database_manager.get_player_by_riot_id("eve", "euw", "euw1")
        assert found is not None
        assert found.game_name == "Eve"

        assert await database_manager.get_player_by_riot_id("Eve", "EUW", "na1") is None
        assert await database_manager.get_player_by_riot_id("Nobody", "EUW", "euw1") is None

    @pytest.mark.asyncio
    async def test_get_player_by_puuid(self, database_manager):
        """Test lookup by PUUID."""
        await database_manager.create_player(PlayerFactory.create(game_name="Frank", puuid="puuid_frank"))

        found = await database_manager.get_player_by_puuid("puuid_frank")
        assert found is not None
        assert found.game_name == "Frank"
        assert await database_manager.get_player_by_puuid("missing") is None

    @pytest.mark.asyncio
    async def test_player_exists(self, database_manager):
        """Test existence check by Riot ID and server."""
        await database_manager.create_player(PlayerFactory.create(game_name="Grace"))

        assert await database_manager.player_exists("Grace", "EUW", "euw1") is True
        assert await database_manager.player_exists("Grace", "EUW", "kr") is False

    @pytest.mark.asyncio
    async def test_update_player(self, database_manager):
        """Test that updates persist ranked fields and bump updated_at."""
        created = await database_manager.create_player(PlayerFactory.create(game_name="Heidi"))

        created.tier = "PLATINUM"
        created.rank = "III"
        created.league_points = 12
        created.summoner_level = 321
        updated = await database_manager.update_player(created)

        assert updated.tier == "PLATINUM"
        assert updated.updated_at >= created.updated_at

        reloaded = await database_manager.get_player_by_puuid(created.puuid)
        assert reloaded.tier == "PLATINUM"
        assert reloaded.rank == "III"
        assert reloaded.league_points == 12
        assert reloaded.summoner_level == 321

    @pytest.mark.asyncio
    async def test_update_player_requires_existing_row(self, database_manager):
        """Test updating an unsaved or deleted player fails."""
        with pytest.raises(ValueError):
            await database_manager.update_player(PlayerFactory.create())

        ghost = PlayerFactory.create()
        ghost.id = 9999
        with pytest.raises(ValueError, match="not found"):
            await database_manager.update_player(ghost)

    @pytest.mark.asyncio
    async def test_get_players_page(self, database_manager):
        """Test pagination returns newest players first with the total count."""
        for player in PlayerFactory.create_multiple(5):
            await database_manager.create_player(player)

        first_page, total = await database_manager.get_players_page(page=1, limit=2)
        last_page, _ = await database_manager.get_players_page(page=3, limit=2)

        assert total == 5
        assert [p.game_name for p in first_page] == ["Player5", "Player4"]
        assert [p.game_name for p in last_page] == ["Player1"]

    @pytest.mark.asyncio
    async def test_get_players_by_server(self, database_manager):
        """Test filtering players by server."""
        await database_manager.create_player(PlayerFactory.create(game_name="Ivan", server="euw1", puuid="p1"))
        await database_manager.create_player(PlayerFactory.create(game_name="Judy", server="na1", puuid="p2"))
        await database_manager.create_player(PlayerFactory.create(game_name="Karl", server="euw1", puuid="p3"))

        euw_players = await database_manager.get_players_by_server("euw1")

        assert [p.game_name for p in euw_players] == ["Ivan", "Karl"]

    @pytest.mark.asyncio
    async def test_delete_player(self, database_manager):
        """Test deleting by id."""
        created = await database_manager.create_player(PlayerFactory.create(game_name="Liam"))

        assert await database_manager.delete_player(created.id) is True
        assert await database_manager.delete_player(created.id) is False
        assert await database_manager.get_all_players() == []

    @pytest.mark.asyncio
    async def test_delete_player_by_riot_id(self, database_manager):
        """Test deleting by Riot ID on a server."""
        await database_manager.create_player(PlayerFactory.create(game_name="Mia", tag_line="EUW"))

        assert await database_manager.delete_player_by_riot_id("Mia", "EUW", "na1") is False
        assert await database_manager.delete_player_by_riot_id("mia", "euw", "euw1") is True
        assert await database_manager.player_exists("Mia", "EUW", "euw1") is False
