# app/database.py
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from bson import ObjectId
from typing import Optional
import logging

from app import config

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    """Return the shared Motor client, creating it on first use."""
    global _client
    if _client is None:
        if not config.MONGODB_URL:
            raise ValueError("MONGODB_URL environment variable is not set")
        _client = AsyncIOMotorClient(
            config.MONGODB_URL,
            tz_aware=True,
            serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS,
            # bounds every operation, not just finding a server
            timeoutMS=config.MONGODB_TIMEOUT_MS,
        )
    return _client


def get_db() -> AsyncIOMotorDatabase:
    return get_client()[config.MONGODB_DB]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the stores rely on. Safe to run on every startup."""
    await db.users.create_index("username", unique=True)
    await db.users.create_index("email", unique=True)

    await db.leaderboard.create_index([("score", DESCENDING)])
    await db.leaderboard.create_index([("country", ASCENDING), ("score", DESCENDING)])
    # One entry per player name; concurrent first submissions rely on this
    await db.leaderboard.create_index("playerName", unique=True)

    await db.email_tokens.create_index("token", unique=True)
    await db.email_tokens.create_index("expiresAt", expireAfterSeconds=0)


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def serialize_mongo_doc(doc):
    """Convert a MongoDB document to a plain dict with a string ``id``."""
    if doc is None:
        return None

    serialized = {}
    for key, value in doc.items():
        if key == "_id":
            serialized["id"] = str(value)
        elif isinstance(value, ObjectId):
            serialized[key] = str(value)
        else:
            serialized[key] = value
    return serialized
