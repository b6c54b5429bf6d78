"""Leaderboard ranking engine against the in-memory store."""

import asyncio
import itertools
import random

import pytest

from app.leaderboard import LeaderboardService
from app.storage.memory import InMemoryLeaderboardStore


class InterleavingStore(InMemoryLeaderboardStore):
    """Yields to the loop after every lookup so concurrent submissions interleave."""

    async def find_by_name(self, player_name):
        entry = await super().find_by_name(player_name)
        await asyncio.sleep(0)
        return entry


@pytest.mark.asyncio
async def test_alice_scenario(service):
    entry = await service.submit_score("alice", 10, "US")
    assert (entry.playerName, entry.score, entry.country) == ("alice", 10, "US")

    entry = await service.submit_score("alice", 5, "US")
    assert entry.score == 10

    entry = await service.submit_score("alice", 25, "CA")
    assert entry.score == 25
    assert entry.country == "CA"

    await service.submit_score("bob", 7, "US")
    top = await service.get_global_leaderboard(10)
    assert [(e.playerName, e.score, e.country) for e in top][0] == ("alice", 25, "CA")


@pytest.mark.asyncio
async def test_missing_country_defaults_and_is_retained(service):
    entry = await service.submit_score("carol", 3)
    assert entry.country == "XX"

    await service.submit_score("dave", 1, "IN")
    entry = await service.submit_score("dave", 9)
    assert entry.score == 9
    assert entry.country == "IN"


@pytest.mark.asyncio
async def test_same_submission_twice_is_idempotent(service):
    first = await service.submit_score("erin", 42, "GB")
    second = await service.submit_score("erin", 42, "GB")
    assert second == first


@pytest.mark.asyncio
async def test_dominated_submission_keeps_country_and_timestamp(service):
    first = await service.submit_score("frank", 50, "DE")
    later = await service.submit_score("frank", 49, "FR")
    assert later.country == "DE"
    assert later.updatedAt == first.updatedAt


@pytest.mark.asyncio
async def test_improvement_refreshes_updated_at(service):
    first = await service.submit_score("gina", 1)
    improved = await service.submit_score("gina", 2)
    assert improved.id == first.id
    assert improved.createdAt == first.createdAt
    assert improved.updatedAt >= first.updatedAt


@pytest.mark.asyncio
async def test_names_are_case_sensitive(service):
    await service.submit_score("Hank", 5)
    await service.submit_score("hank", 3)
    names = {e.playerName for e in await service.get_global_leaderboard()}
    assert names == {"Hank", "hank"}


@pytest.mark.asyncio
@pytest.mark.parametrize("order", list(itertools.permutations([3, 17, 8, 0])))
async def test_final_score_is_max_in_any_order(order):
    service = LeaderboardService(InMemoryLeaderboardStore())
    for score in order:
        await service.submit_score("ivy", score)
    assert (await service.store.find_by_name("ivy")).score == 17


@pytest.mark.asyncio
@pytest.mark.parametrize("scores", [(80, 95), (95, 80)])
async def test_concurrent_first_submissions_higher_wins(scores):
    store = InterleavingStore()
    service = LeaderboardService(store)

    await asyncio.gather(*(service.submit_score("jack", s, "US") for s in scores))

    assert len(await store.find_top(10)) == 1
    assert (await store.find_by_name("jack")).score == 95


@pytest.mark.asyncio
@pytest.mark.parametrize("scores", [(80, 95), (95, 80)])
async def test_concurrent_updates_higher_wins(scores):
    store = InterleavingStore()
    service = LeaderboardService(store)
    await service.submit_score("kate", 10)

    results = await asyncio.gather(*(service.submit_score("kate", s) for s in scores))

    assert (await store.find_by_name("kate")).score == 95
    assert max(r.score for r in results) == 95


@pytest.mark.asyncio
async def test_many_concurrent_submissions_converge():
    store = InterleavingStore()
    service = LeaderboardService(store)
    scores = list(range(100))
    random.Random(7).shuffle(scores)

    await asyncio.gather(*(service.submit_score("liam", s) for s in scores))

    entries = await store.find_top(10)
    assert len(entries) == 1
    assert entries[0].score == 99


@pytest.mark.asyncio
async def test_global_leaderboard_order_and_limit(service):
    for name, score in [("a", 5), ("b", 9), ("c", 5), ("d", 1), ("e", 9)]:
        await service.submit_score(name, score)

    top = await service.get_global_leaderboard(4)
    assert [e.playerName for e in top] == ["b", "e", "a", "c"]

    everyone = await service.get_global_leaderboard()
    scores = [e.score for e in everyone]
    assert scores == sorted(scores, reverse=True)
    assert len(everyone) == 5


@pytest.mark.asyncio
async def test_country_leaderboard_filters(service):
    await service.submit_score("mia", 10, "IN")
    await service.submit_score("noah", 30, "US")
    await service.submit_score("olga", 20, "IN")
    await service.submit_score("pete", 5)

    india = await service.get_country_leaderboard("IN")
    assert [e.playerName for e in india] == ["olga", "mia"]
    assert [e.playerName for e in await service.get_country_leaderboard("IN", 1)] == ["olga"]
    assert [e.playerName for e in await service.get_country_leaderboard("XX")] == ["pete"]
    assert await service.get_country_leaderboard("FR") == []


@pytest.mark.asyncio
async def test_total_score(service):
    assert await service.get_total_global_score() == 0

    await service.submit_score("quinn", 10)
    await service.submit_score("rosa", 15)
    await service.submit_score("quinn", 12)
    await service.submit_score("rosa", 1)
    assert await service.get_total_global_score() == 27


@pytest.mark.asyncio
async def test_returned_entries_are_detached_from_the_store(service, leaderboard_store):
    entry = await service.submit_score("sam", 4)
    entry.score = 1000
    assert (await leaderboard_store.find_by_name("sam")).score == 4
