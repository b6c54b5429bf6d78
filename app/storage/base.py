# app/storage/base.py
"""Storage contracts shared by the MongoDB and in-memory backends.

The leaderboard engine only needs a handful of primitives from its backend:
find one entry by player name, insert, a conditional "raise the score"
update, a sorted top-N query and a sum over all scores. Each primitive must
be atomic on its own; the engine composes them into the best-score-wins merge.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from app.models import EmailToken, LeaderboardEntry, User


class StorageError(Exception):
    """The backend failed or is unreachable."""


class DuplicateEntryError(StorageError):
    """A unique key (player name, username, email, token) already exists."""


class LeaderboardStore(ABC):
    @abstractmethod
    async def find_by_name(self, player_name: str) -> Optional[LeaderboardEntry]:
        ...

    @abstractmethod
    async def insert(self, player_name: str, score: int, country: str) -> LeaderboardEntry:
        """Create an entry. Raises DuplicateEntryError if the name is taken."""

    @abstractmethod
    async def update_if_higher(
        self, player_name: str, score: int, country: Optional[str] = None
    ) -> Optional[LeaderboardEntry]:
        """Set ``score`` only if it beats the stored one.

        ``country`` replaces the stored region only when given. Returns the
        updated entry, or None when nothing matched (no entry, or the stored
        score is already >= ``score``).
        """

    @abstractmethod
    async def find_top(self, limit: int, country: Optional[str] = None) -> List[LeaderboardEntry]:
        """Entries by score descending, ties in insertion order."""

    @abstractmethod
    async def total_score(self) -> int:
        ...


class AccountStore(ABC):
    @abstractmethod
    async def insert_token(self, token: EmailToken) -> None:
        ...

    @abstractmethod
    async def find_token(self, token: str) -> Optional[EmailToken]:
        ...

    @abstractmethod
    async def delete_token(self, token: str) -> None:
        ...

    @abstractmethod
    async def find_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def insert_user(self, username: str, email: str, password_hash: str) -> User:
        """Create a verified user. Raises DuplicateEntryError on a taken username or email."""

    @abstractmethod
    async def find_credentials(self, email: str) -> Optional[Tuple[User, str]]:
        """Return the user and their password hash, for login checks only."""
