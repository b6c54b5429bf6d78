# app/storage/mongo.py
from datetime import datetime, timezone
from functools import wraps
from typing import List, Optional, Tuple
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.database import serialize_mongo_doc
from app.models import EmailToken, LeaderboardEntry, User
from app.storage.base import AccountStore, DuplicateEntryError, LeaderboardStore, StorageError

logger = logging.getLogger(__name__)


def translate_errors(func):
    """Re-raise driver errors as storage errors so callers never import pymongo."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except DuplicateKeyError as e:
            raise DuplicateEntryError(str(e)) from e
        except PyMongoError as e:
            logger.error(f"MongoDB operation {func.__name__} failed: {e}")
            raise StorageError(str(e)) from e

    return wrapper


def _to_entry(doc) -> Optional[LeaderboardEntry]:
    if doc is None:
        return None
    return LeaderboardEntry(**serialize_mongo_doc(doc))


def _to_user(doc) -> Optional[User]:
    if doc is None:
        return None
    data = serialize_mongo_doc(doc)
    data.pop("passwordHash", None)
    return User(**data)


class MongoLeaderboardStore(LeaderboardStore):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.leaderboard

    @translate_errors
    async def find_by_name(self, player_name: str) -> Optional[LeaderboardEntry]:
        return _to_entry(await self.collection.find_one({"playerName": player_name}))

    @translate_errors
    async def insert(self, player_name: str, score: int, country: str) -> LeaderboardEntry:
        now = datetime.now(timezone.utc)
        doc = {
            "playerName": player_name,
            "score": score,
            "country": country,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_entry(doc)

    @translate_errors
    async def update_if_higher(
        self, player_name: str, score: int, country: Optional[str] = None
    ) -> Optional[LeaderboardEntry]:
        fields = {"score": score, "updatedAt": datetime.now(timezone.utc)}
        if country:
            fields["country"] = country

        # Atomic on the server: matches only while the stored score is lower
        doc = await self.collection.find_one_and_update(
            {"playerName": player_name, "score": {"$lt": score}},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return _to_entry(doc)

    @translate_errors
    async def find_top(self, limit: int, country: Optional[str] = None) -> List[LeaderboardEntry]:
        query = {} if country is None else {"country": country}
        docs = await (
            self.collection.find(query)
            .sort([("score", DESCENDING), ("_id", ASCENDING)])
            .limit(limit)
            .to_list(limit)
        )
        return [_to_entry(doc) for doc in docs]

    @translate_errors
    async def total_score(self) -> int:
        result = await self.collection.aggregate(
            [{"$group": {"_id": None, "total": {"$sum": "$score"}}}]
        ).to_list(1)
        return result[0]["total"] if result else 0


class MongoAccountStore(AccountStore):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = db.users
        self.tokens = db.email_tokens

    @translate_errors
    async def insert_token(self, token: EmailToken) -> None:
        await self.tokens.insert_one(token.model_dump())

    @translate_errors
    async def find_token(self, token: str) -> Optional[EmailToken]:
        doc = await self.tokens.find_one({"token": token}, {"_id": 0})
        return EmailToken(**doc) if doc else None

    @translate_errors
    async def delete_token(self, token: str) -> None:
        await self.tokens.delete_one({"token": token})

    @translate_errors
    async def find_user_by_username(self, username: str) -> Optional[User]:
        return _to_user(await self.users.find_one({"username": username}))

    @translate_errors
    async def find_user_by_email(self, email: str) -> Optional[User]:
        return _to_user(await self.users.find_one({"email": email}))

    @translate_errors
    async def insert_user(self, username: str, email: str, password_hash: str) -> User:
        now = datetime.now(timezone.utc)
        doc = {
            "username": username,
            "email": email,
            "passwordHash": password_hash,
            "emailVerified": now,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self.users.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_user(doc)

    @translate_errors
    async def find_credentials(self, email: str) -> Optional[Tuple[User, str]]:
        doc = await self.users.find_one({"email": email})
        if doc is None:
            return None
        return _to_user(doc), doc.get("passwordHash", "")
