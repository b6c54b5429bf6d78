# app/storage/memory.py
"""In-process stores for local runs and tests.

Each primitive holds the store lock for its whole body, which gives the same
single-document atomicity MongoDB provides. Unique keys are enforced the way
the MongoDB unique indexes enforce them.
"""

import asyncio
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional, Tuple

from app.models import EmailToken, LeaderboardEntry, User
from app.storage.base import AccountStore, DuplicateEntryError, LeaderboardStore


class InMemoryLeaderboardStore(LeaderboardStore):
    def __init__(self):
        self._lock = asyncio.Lock()
        self._ids = count(1)
        # dicts keep insertion order, which doubles as the tie-break
        self._entries: Dict[str, LeaderboardEntry] = {}

    async def find_by_name(self, player_name: str) -> Optional[LeaderboardEntry]:
        async with self._lock:
            entry = self._entries.get(player_name)
            return entry.model_copy() if entry else None

    async def insert(self, player_name: str, score: int, country: str) -> LeaderboardEntry:
        async with self._lock:
            if player_name in self._entries:
                raise DuplicateEntryError(f"playerName {player_name!r} already exists")
            now = datetime.now(timezone.utc)
            entry = LeaderboardEntry(
                id=str(next(self._ids)),
                playerName=player_name,
                score=score,
                country=country,
                createdAt=now,
                updatedAt=now,
            )
            self._entries[player_name] = entry
            return entry.model_copy()

    async def update_if_higher(
        self, player_name: str, score: int, country: Optional[str] = None
    ) -> Optional[LeaderboardEntry]:
        async with self._lock:
            entry = self._entries.get(player_name)
            if entry is None or entry.score >= score:
                return None
            entry.score = score
            if country:
                entry.country = country
            entry.updatedAt = datetime.now(timezone.utc)
            return entry.model_copy()

    async def find_top(self, limit: int, country: Optional[str] = None) -> List[LeaderboardEntry]:
        async with self._lock:
            entries = [
                e for e in self._entries.values() if country is None or e.country == country
            ]
        # sorted() is stable, so equal scores stay in insertion order
        ranked = sorted(entries, key=lambda e: e.score, reverse=True)
        return [e.model_copy() for e in ranked[:limit]]

    async def total_score(self) -> int:
        async with self._lock:
            return sum(e.score for e in self._entries.values())


class InMemoryAccountStore(AccountStore):
    def __init__(self):
        self._lock = asyncio.Lock()
        self._ids = count(1)
        self._tokens: Dict[str, EmailToken] = {}
        self._users: Dict[str, User] = {}
        self._password_hashes: Dict[str, str] = {}

    async def insert_token(self, token: EmailToken) -> None:
        async with self._lock:
            if token.token in self._tokens:
                raise DuplicateEntryError("token already exists")
            self._tokens[token.token] = token

    async def find_token(self, token: str) -> Optional[EmailToken]:
        async with self._lock:
            return self._tokens.get(token)

    async def delete_token(self, token: str) -> None:
        async with self._lock:
            self._tokens.pop(token, None)

    async def find_user_by_username(self, username: str) -> Optional[User]:
        async with self._lock:
            return next((u for u in self._users.values() if u.username == username), None)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        async with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    async def insert_user(self, username: str, email: str, password_hash: str) -> User:
        async with self._lock:
            for user in self._users.values():
                if user.username == username or user.email == email:
                    raise DuplicateEntryError("username or email already registered")
            now = datetime.now(timezone.utc)
            user = User(
                id=str(next(self._ids)),
                username=username,
                email=email,
                emailVerified=now,
                createdAt=now,
            )
            self._users[user.id] = user
            self._password_hashes[user.id] = password_hash
            return user

    async def find_credentials(self, email: str) -> Optional[Tuple[User, str]]:
        async with self._lock:
            user = next((u for u in self._users.values() if u.email == email), None)
            if user is None:
                return None
            return user, self._password_hashes[user.id]
