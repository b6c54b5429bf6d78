# app/leaderboard.py
"""Leaderboard ranking engine.

Best score wins: a player's stored score only ever goes up. The engine keeps no
state of its own; every call goes straight to the store, so any number of
requests (from any number of devices) can run concurrently.
"""

import logging
from typing import List, Optional

from app.config import COUNTRY_LEADERBOARD_LIMIT, GLOBAL_LEADERBOARD_LIMIT, UNKNOWN_COUNTRY
from app.models import LeaderboardEntry
from app.storage.base import DuplicateEntryError, LeaderboardStore

logger = logging.getLogger(__name__)


class LeaderboardService:
    def __init__(self, store: LeaderboardStore):
        self.store = store

    async def submit_score(
        self, player_name: str, score: int, country: Optional[str] = None
    ) -> LeaderboardEntry:
        """Merge a submission into the player's entry and return the result.

        A score that does not beat the stored one leaves the entry untouched
        and is returned as-is; that is a normal outcome, not an error.
        """
        existing = await self.store.find_by_name(player_name)

        if existing is None:
            try:
                entry = await self.store.insert(player_name, score, country or UNKNOWN_COUNTRY)
                logger.info(f"New leaderboard entry for '{player_name}' with score {score}")
                return entry
            except DuplicateEntryError:
                # Another request created the entry first; merge into it instead
                logger.info(f"Concurrent first submission for '{player_name}', retrying as update")
                existing = await self.store.find_by_name(player_name)
                if existing is None:
                    raise

        if score <= existing.score:
            return existing

        updated = await self.store.update_if_higher(player_name, score, country)
        if updated is None:
            # A higher score landed between our read and our write
            return await self.store.find_by_name(player_name)

        logger.info(f"Player '{player_name}' improved {existing.score} -> {updated.score}")
        return updated

    async def get_global_leaderboard(self, limit: int = GLOBAL_LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
        return await self.store.find_top(limit)

    async def get_country_leaderboard(
        self, country: str, limit: int = COUNTRY_LEADERBOARD_LIMIT
    ) -> List[LeaderboardEntry]:
        return await self.store.find_top(limit, country=country)

    async def get_total_global_score(self) -> int:
        return await self.store.total_score() or 0
