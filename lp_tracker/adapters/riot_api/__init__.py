"""Riot API adapter package.

This package contains the Riot API client adapter for the LP Tracker service.
"""

from .client import (
    RiotAPIClient,
    RiotAPIError,
    SummonerNotFoundError,
    RateLimitError,
    InvalidRegionError,
    AccountInfo,
    SummonerInfo,
)

__all__ = [
    # Client
    "RiotAPIClient",
    # Exceptions
    "RiotAPIError",
    "SummonerNotFoundError",
    "RateLimitError",
    "InvalidRegionError",
    # Data classes
    "AccountInfo",
    "SummonerInfo",
]
