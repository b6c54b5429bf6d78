# app/client.py
"""Async client for the leaderboard API.

Leaderboard reads are cached per view (global, per-country, total); a
successful score submission invalidates every cached view so the next read
reflects the new entry.
"""

import logging
from typing import Dict, List, Optional

import httpx

from app.config import UNKNOWN_COUNTRY
from app.models import LeaderboardEntry

logger = logging.getLogger(__name__)

GEOLOCATION_URL = "https://ipapi.co/country/"


async def detect_country(http: Optional[httpx.AsyncClient] = None, url: str = GEOLOCATION_URL) -> str:
    """Best-effort 2-letter country of the caller. Falls back to "XX"."""
    owns_client = http is None
    http = http or httpx.AsyncClient(timeout=5.0)
    try:
        response = await http.get(url)
        response.raise_for_status()
        country = response.text.strip().upper()
    except httpx.HTTPError as e:
        logger.warning(f"Country lookup failed: {e}")
        return UNKNOWN_COUNTRY
    finally:
        if owns_client:
            await http.aclose()

    if len(country) != 2 or not country.isalpha():
        return UNKNOWN_COUNTRY
    return country


class LeaderboardClient:
    def __init__(self, base_url: str = "", http: Optional[httpx.AsyncClient] = None):
        self.http = http or httpx.AsyncClient(base_url=base_url, timeout=10.0)
        self._cache: Dict[tuple, object] = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    def invalidate(self) -> None:
        self._cache.clear()

    async def submit_score(self, player_name: str, score: int, country: Optional[str] = None) -> LeaderboardEntry:
        payload = {"playerName": player_name, "score": score}
        if country:
            payload["country"] = country
        response = await self.http.post("/api/leaderboard/score", json=payload)
        response.raise_for_status()
        self.invalidate()
        return LeaderboardEntry(**response.json())

    async def _cached_get(self, key: tuple, path: str, params: Optional[dict] = None):
        if key not in self._cache:
            response = await self.http.get(path, params=params)
            response.raise_for_status()
            self._cache[key] = response.json()
        return self._cache[key]

    async def global_leaderboard(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        params = {"limit": limit} if limit is not None else None
        data = await self._cached_get(("global", limit), "/api/leaderboard/global", params)
        return [LeaderboardEntry(**item) for item in data]

    async def country_leaderboard(self, country: str, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        params = {"limit": limit} if limit is not None else None
        data = await self._cached_get(("country", country, limit), f"/api/leaderboard/country/{country}", params)
        return [LeaderboardEntry(**item) for item in data]

    async def total_score(self) -> int:
        data = await self._cached_get(("total",), "/api/leaderboard/total")
        return data["totalScore"]
