"""Riot API client with rate limiting and error handling."""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from lp_tracker.core.entities import Player, RankedStats
from lp_tracker.core.enums import QueueType, Server

logger = structlog.get_logger()


@dataclass
class AccountInfo:
    """Account information from the Riot account API."""

    puuid: str
    game_name: str
    tag_line: str


@dataclass
class SummonerInfo:
    """Summoner information from the summoner API."""

    id: str
    puuid: str
    summoner_level: int
    profile_icon_id: int = 0
    revision_date: int = 0


class RiotAPIError(Exception):
    """Base exception for Riot API errors."""

    pass


class SummonerNotFoundError(RiotAPIError):
    """Summoner not found error."""

    pass


class RateLimitError(RiotAPIError):
    """Rate limit exceeded error."""

    pass


class InvalidRegionError(RiotAPIError):
    """Invalid region error."""

    pass


class RiotAPIClient:
    """Riot API client with rate limiting and error handling."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        account_base_url: str = "https://europe.api.riotgames.com",
        request_timeout: float = 10.0,
        min_request_interval: float = 1.2,
        metrics=None,
    ):
        """Initialize the Riot API client.

        Args:
            api_key: Riot API key
            base_url: Single host for every endpoint (mock servers); defaults to
                the platform host of each server
            account_base_url: Regional host for the account API
            request_timeout: Request timeout in seconds
            min_request_interval: Minimum delay between two requests in seconds
            metrics: Optional MetricsProvider recording API calls
        """
        if not api_key:
            raise ValueError("Riot API key is required")

        self.api_key = api_key
        self.base_url = base_url
        self.account_base_url = account_base_url
        self.request_timeout = request_timeout
        self.metrics = metrics
        self.client = httpx.AsyncClient(timeout=request_timeout)

        # Simple rate limiting - track last request time
        self._last_request_time = 0.0
        self._min_request_interval = min_request_interval

        # Rate limit tracking for 429 responses
        self._rate_limit_reset_time = 0.0

        # Serializes the spacing check so concurrent callers queue up
        self._request_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    def _get_base_url(self, server: str) -> str:
        """Get the platform base URL for a server."""
        if self.base_url:
            return self.base_url

        resolved = Server.from_string(server)
        if resolved is None:
            raise InvalidRegionError(f"unsupported server: {server}")
        return resolved.platform_host

    def _get_account_url(self) -> str:
        """Get the base URL for the account API."""
        return self.base_url if self.base_url else self.account_base_url

    async def _rate_limit_delay(self):
        """Apply rate limiting delay.

        Concurrent callers pass one at a time, each at least
        min_request_interval after the previous one.
        """
        async with self._request_lock:
            current_time = time.time()

            # Check if we're in a rate limit cooldown
            if current_time < self._rate_limit_reset_time:
                wait_time = self._rate_limit_reset_time - current_time
                logger.info("Rate limit cooldown active", wait_time=wait_time)
                await asyncio.sleep(wait_time)
                current_time = time.time()

            time_since_last = current_time - self._last_request_time
            if time_since_last < self._min_request_interval:
                await asyncio.sleep(self._min_request_interval - time_since_last)

            self._last_request_time = time.time()

    def _record_call(self, endpoint_type: str, status_code: int, duration: float, error_type: Optional[str] = None):
        if self.metrics:
            self.metrics.record_riot_api_call(
                endpoint_type=endpoint_type,
                status_code=status_code,
                duration=duration,
                error_type=error_type,
            )

    async def _make_request(
        self, url: str, endpoint_type: str = "generic", not_found_message: Optional[str] = None
    ) -> Any:
        """Make a request to the Riot API with rate limiting and error handling.

        Args:
            url: The URL to request
            endpoint_type: Endpoint label used for logs and metrics
            not_found_message: When set, a 404 raises SummonerNotFoundError with
                this message instead of a generic RiotAPIError
        """
        await self._rate_limit_delay()

        headers = {"X-Riot-Token": self.api_key, "Accept": "application/json"}
        start_time = time.time()

        try:
            response = await self.client.get(url, headers=headers)
        except httpx.RequestError as e:
            self._record_call(endpoint_type, 0, time.time() - start_time, error_type="request_error")
            logger.error("HTTP request failed", url=url, error=str(e))
            raise RiotAPIError(f"Request failed: {e}")

        self._record_call(endpoint_type, response.status_code, time.time() - start_time)

        if response.status_code == 429:
            retry_after = int(response.headers.get("Retry-After", 60))
            self._rate_limit_reset_time = time.time() + retry_after
            logger.warning("Rate limited by Riot API", retry_after=retry_after)
            raise RateLimitError(f"Rate limited. Retry after {retry_after} seconds")

        if response.status_code == 404:
            if not_found_message:
                raise SummonerNotFoundError(not_found_message)
            raise RiotAPIError(f"Resource not found: {endpoint_type}")

        if response.status_code >= 400:
            logger.error(
                "Riot API error",
                url=url,
                status_code=response.status_code,
                response=response.text,
            )
            raise RiotAPIError(f"API request failed with status {response.status_code}: {response.text}")

        return response.json()

    async def get_account_by_riot_id(self, game_name: str, tag_line: str) -> AccountInfo:
        """Get account information by Riot ID (game name and tag line).

        Raises:
            SummonerNotFoundError: If account is not found
            RateLimitError: If rate limited
            RiotAPIError: For other API errors
        """
        url = (
            f"{self._get_account_url()}/riot/account/v1/accounts/by-riot-id/"
            f"{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
        )
        data = await self._make_request(
            url, endpoint_type="account", not_found_message=f"Account not found: {game_name}#{tag_line}"
        )
        return AccountInfo(
            puuid=data["puuid"],
            game_name=data.get("gameName", game_name),
            tag_line=data.get("tagLine", tag_line),
        )

    async def get_summoner_by_puuid(self, puuid: str, server: str) -> SummonerInfo:
        """Get the summoner of an account on a given server.

        Raises:
            InvalidRegionError: If the server is unknown
            SummonerNotFoundError: If the account has no summoner on the server
            RiotAPIError: For other API errors
        """
        url = f"{self._get_base_url(server)}/lol/summoner/v4/summoners/by-puuid/{puuid}"
        data = await self._make_request(
            url, endpoint_type="summoner", not_found_message=f"Summoner not found on server {server}"
        )
        return SummonerInfo(
            id=data.get("id", ""),
            puuid=data.get("puuid", puuid),
            summoner_level=data.get("summonerLevel", 0),
            profile_icon_id=data.get("profileIconId", 0),
            revision_date=data.get("revisionDate", 0),
        )

    async def get_league_entries_by_summoner_id(self, summoner_id: str, server: str) -> List[Dict[str, Any]]:
        """Get every ranked queue entry of a summoner."""
        url = f"{self._get_base_url(server)}/lol/league/v4/entries/by-summoner/{summoner_id}"
        return await self._make_request(url, endpoint_type="league")

    @staticmethod
    def find_ranked_solo_entry(entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Select the Ranked Solo/Duo entry out of all queue entries."""
        for entry in entries:
            if entry.get("queueType") == QueueType.RANKED_SOLO_5X5.value:
                return entry
        return None

    def _ranked_stats_from_entries(self, entries: List[Dict[str, Any]]) -> RankedStats:
        ranked_entry = self.find_ranked_solo_entry(entries)
        if ranked_entry is None:
            return RankedStats.unranked()
        return RankedStats.from_league_entry(ranked_entry)

    async def get_player_by_riot_id(self, game_name: str, tag_line: str, server: str) -> Player:
        """Look up a player's current ranked stats by Riot ID.

        Composes the account, summoner and league entries endpoints. A failing
        league entries call leaves the player unranked instead of failing the
        lookup.

        Args:
            game_name: The game name part of the Riot ID
            tag_line: The tag line part of the Riot ID (without #)
            server: Platform server the player plays on

        Returns:
            Player populated with summoner and ranked information

        Raises:
            SummonerNotFoundError: If no account or summoner matches
            InvalidRegionError: If the server is unknown
            RiotAPIError: For other API errors
        """
        if not game_name or not game_name.strip():
            raise SummonerNotFoundError("Game name cannot be empty")
        if not tag_line or not tag_line.strip():
            raise SummonerNotFoundError("Tag line cannot be empty")

        game_name = game_name.strip()
        tag_line = tag_line.strip()

        logger.info("Fetching player by Riot ID", game_name=game_name, tag_line=tag_line, server=server)

        account = await self.get_account_by_riot_id(game_name, tag_line)
        summoner = await self.get_summoner_by_puuid(account.puuid, server)

        try:
            entries = await self.get_league_entries_by_summoner_id(summoner.id, server)
            stats = self._ranked_stats_from_entries(entries)
        except RiotAPIError as e:
            logger.warning(
                "League entries unavailable, defaulting to unranked",
                game_name=game_name,
                tag_line=tag_line,
                error=str(e),
            )
            stats = RankedStats.unranked()

        player = Player(
            puuid=account.puuid,
            game_name=game_name,
            tag_line=tag_line,
            server=server,
            summoner_id=summoner.id,
            summoner_level=summoner.summoner_level,
            profile_icon_id=summoner.profile_icon_id,
        )
        player.apply_ranked_stats(stats)

        logger.info(
            "Successfully fetched player",
            riot_id=player.riot_id,
            puuid=player.puuid,
            tier=player.tier,
        )
        return player

    async def update_player_rank(self, player: Player) -> Player:
        """Refresh a tracked player's summoner level and ranked stats in place.

        Raises:
            SummonerNotFoundError: If the summoner no longer exists
            RiotAPIError: For any API error, including league entries failures
        """
        summoner = await self.get_summoner_by_puuid(player.puuid, player.server)
        entries = await self.get_league_entries_by_summoner_id(summoner.id, player.server)

        player.apply_ranked_stats(self._ranked_stats_from_entries(entries))
        player.summoner_id = summoner.id
        player.summoner_level = summoner.summoner_level
        player.profile_icon_id = summoner.profile_icon_id
        return player
