"""MongoDB store query shapes and error translation, with a mocked collection."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from app.storage.base import DuplicateEntryError, StorageError
from app.storage.mongo import MongoLeaderboardStore

pytestmark = pytest.mark.asyncio

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_store():
    db = MagicMock()
    return MongoLeaderboardStore(db), db.leaderboard


def doc(**overrides):
    base = {
        "_id": ObjectId(),
        "playerName": "alice",
        "score": 10,
        "country": "US",
        "createdAt": NOW,
        "updatedAt": NOW,
    }
    base.update(overrides)
    return base


async def test_find_by_name_maps_object_id() -> None:
    store, collection = make_store()
    stored = doc()
    collection.find_one = AsyncMock(return_value=stored)

    entry = await store.find_by_name("alice")

    collection.find_one.assert_awaited_once_with({"playerName": "alice"})
    assert entry.id == str(stored["_id"])
    assert entry.score == 10


async def test_update_if_higher_is_conditional() -> None:
    store, collection = make_store()
    collection.find_one_and_update = AsyncMock(return_value=doc(score=25, country="CA"))

    entry = await store.update_if_higher("alice", 25, "CA")

    query, update = collection.find_one_and_update.await_args.args
    assert query == {"playerName": "alice", "score": {"$lt": 25}}
    assert update["$set"]["score"] == 25
    assert update["$set"]["country"] == "CA"
    assert collection.find_one_and_update.await_args.kwargs["return_document"] is ReturnDocument.AFTER
    assert entry.score == 25


async def test_update_without_country_keeps_stored_one() -> None:
    store, collection = make_store()
    collection.find_one_and_update = AsyncMock(return_value=None)

    assert await store.update_if_higher("alice", 5) is None
    _, update = collection.find_one_and_update.await_args.args
    assert "country" not in update["$set"]


async def test_total_score_empty_collection_is_zero() -> None:
    store, collection = make_store()
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.aggregate = MagicMock(return_value=cursor)

    assert await store.total_score() == 0

    cursor.to_list = AsyncMock(return_value=[{"_id": None, "total": 42}])
    assert await store.total_score() == 42


async def test_duplicate_key_becomes_duplicate_entry() -> None:
    store, collection = make_store()
    collection.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key"))

    with pytest.raises(DuplicateEntryError):
        await store.insert("alice", 1, "XX")


async def test_driver_failure_becomes_storage_error() -> None:
    store, collection = make_store()
    collection.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("timed out"))

    with pytest.raises(StorageError) as exc:
        await store.find_by_name("alice")
    assert not isinstance(exc.value, DuplicateEntryError)


def ranked_cursor(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


async def test_find_top_sorts_by_score_then_insertion() -> None:
    store, collection = make_store()
    docs = [doc(playerName="b", score=9), doc(playerName="a", score=5)]
    cursor = ranked_cursor(docs)
    collection.find = MagicMock(return_value=cursor)

    entries = await store.find_top(2)

    collection.find.assert_called_once_with({})
    cursor.sort.assert_called_once_with([("score", DESCENDING), ("_id", ASCENDING)])
    cursor.limit.assert_called_once_with(2)
    cursor.to_list.assert_awaited_once_with(2)
    assert [(e.playerName, e.score) for e in entries] == [("b", 9), ("a", 5)]
    assert entries[0].id == str(docs[0]["_id"])


async def test_find_top_filters_by_country() -> None:
    store, collection = make_store()
    cursor = ranked_cursor([])
    collection.find = MagicMock(return_value=cursor)

    assert await store.find_top(50, country="IN") == []

    collection.find.assert_called_once_with({"country": "IN"})
    cursor.limit.assert_called_once_with(50)


async def test_insert_returns_entry_with_generated_id() -> None:
    store, collection = make_store()
    inserted_id = ObjectId()
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))

    entry = await store.insert("alice", 7, "XX")

    (stored,) = collection.insert_one.await_args.args
    assert stored["playerName"] == "alice"
    assert stored["score"] == 7
    assert stored["country"] == "XX"
    assert stored["createdAt"] == stored["updatedAt"]
    assert entry.id == str(inserted_id)
    assert entry.score == 7
