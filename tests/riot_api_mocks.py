"""Mock utilities for Riot API responses in tests."""

from typing import Any, Dict, List, Optional

import httpx
import respx

ACCOUNT_BASE_URL = "https://europe.api.riotgames.com"


class RiotAPIMockData:
    """Collection of mock data for Riot API responses."""

    @staticmethod
    def get_account_response(
        game_name: str = "TestSummoner",
        tag_line: str = "EUW",
        puuid: str = "test_puuid_123",
    ) -> Dict[str, Any]:
        """Generate a mock account response from Riot API."""
        return {
            "puuid": puuid,
            "gameName": game_name,
            "tagLine": tag_line,
        }

    @staticmethod
    def get_summoner_response(
        puuid: str = "test_puuid_123",
        summoner_id: str = "test_summoner_123",
        summoner_level: int = 250,
    ) -> Dict[str, Any]:
        """Generate a mock summoner response from Riot API."""
        return {
            "id": summoner_id,
            "puuid": puuid,
            "summonerLevel": summoner_level,
            "profileIconId": 4568,
            "revisionDate": 1700000000000,
        }

    @staticmethod
    def get_league_entry(
        queue_type: str = "RANKED_SOLO_5x5",
        tier: str = "GOLD",
        rank: str = "II",
        league_points: int = 45,
        wins: int = 30,
        losses: int = 25,
    ) -> Dict[str, Any]:
        """Generate one league entry as returned by the league entries endpoint."""
        return {
            "queueType": queue_type,
            "tier": tier,
            "rank": rank,
            "leaguePoints": league_points,
            "wins": wins,
            "losses": losses,
        }

    @staticmethod
    def get_error_response(status_code: int, message: str = "Error") -> Dict[str, Any]:
        """Generate a mock error response."""
        return {"status": {"message": message, "status_code": status_code}}


class RiotAPIMockRouter:
    """Mock router for Riot API endpoints using respx.

    Use as a context manager; every httpx request made inside is routed
    to the registered mocks.
    """

    def __init__(self, account_base_url: str = ACCOUNT_BASE_URL):
        self.account_base_url = account_base_url
        self.router = respx.mock(assert_all_called=False)

    def __enter__(self):
        self.router.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return self.router.__exit__(exc_type, exc_value, traceback)

    @staticmethod
    def platform_url(server: str) -> str:
        return f"https://{server}.api.riotgames.com"

    def mock_get_account_by_riot_id(
        self,
        game_name: str,
        tag_line: str,
        puuid: str = "test_puuid_123",
        status_code: int = 200,
        response_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """Mock the account by Riot ID endpoint."""
        if response_data is None:
            response_data = RiotAPIMockData.get_account_response(game_name, tag_line, puuid)

        url = f"{self.account_base_url}/riot/account/v1/accounts/by-riot-id/{game_name}/{tag_line}"
        return self.router.get(url).mock(
            return_value=httpx.Response(status_code=status_code, json=response_data, headers=headers)
        )

    def mock_account_not_found(self, game_name: str, tag_line: str):
        """Mock an account not found response (404)."""
        return self.mock_get_account_by_riot_id(
            game_name,
            tag_line,
            status_code=404,
            response_data=RiotAPIMockData.get_error_response(404, "Account not found"),
        )

    def mock_get_summoner_by_puuid(
        self,
        puuid: str,
        server: str = "euw1",
        summoner_id: str = "test_summoner_123",
        summoner_level: int = 250,
        status_code: int = 200,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        """Mock the summoner by PUUID endpoint of a platform."""
        if response_data is None:
            response_data = RiotAPIMockData.get_summoner_response(puuid, summoner_id, summoner_level)

        url = f"{self.platform_url(server)}/lol/summoner/v4/summoners/by-puuid/{puuid}"
        return self.router.get(url).mock(
            return_value=httpx.Response(status_code=status_code, json=response_data)
        )

    def mock_get_league_entries(
        self,
        summoner_id: str,
        server: str = "euw1",
        entries: Optional[List[Dict[str, Any]]] = None,
        status_code: int = 200,
    ):
        """Mock the league entries by summoner endpoint of a platform."""
        if entries is None:
            entries = [RiotAPIMockData.get_league_entry()]
        if status_code >= 400:
            entries = RiotAPIMockData.get_error_response(status_code)

        url = f"{self.platform_url(server)}/lol/league/v4/entries/by-summoner/{summoner_id}"
        return self.router.get(url).mock(
            return_value=httpx.Response(status_code=status_code, json=entries)
        )

    def mock_player(
        self,
        game_name: str,
        tag_line: str,
        server: str = "euw1",
        puuid: str = "test_puuid_123",
        summoner_id: str = "test_summoner_123",
        summoner_level: int = 250,
        entries: Optional[List[Dict[str, Any]]] = None,
    ):
        """Mock the three endpoints needed to look up one player."""
        self.mock_get_account_by_riot_id(game_name, tag_line, puuid=puuid)
        self.mock_get_summoner_by_puuid(
            puuid, server=server, summoner_id=summoner_id, summoner_level=summoner_level
        )
        self.mock_get_league_entries(summoner_id, server=server, entries=entries)
