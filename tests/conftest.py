"""Shared test fixtures."""

import os

# Must be set before app.config is imported
os.environ["STORAGE_BACKEND"] = "memory"
os.environ.setdefault("SMTP_HOST", "")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from app.dependencies import get_account_store, get_email_sender, get_leaderboard_store
from app.leaderboard import LeaderboardService
from app.mailer import LoggingEmailSender
from app.main import app
from app.storage.memory import InMemoryAccountStore, InMemoryLeaderboardStore


@pytest.fixture()
def leaderboard_store():
    return InMemoryLeaderboardStore()


@pytest.fixture()
def account_store():
    return InMemoryAccountStore()


@pytest.fixture()
def mailer():
    return LoggingEmailSender()


@pytest.fixture()
def service(leaderboard_store):
    return LeaderboardService(leaderboard_store)


@pytest.fixture()
def overrides(leaderboard_store, account_store, mailer):
    app.dependency_overrides[get_leaderboard_store] = lambda: leaderboard_store
    app.dependency_overrides[get_account_store] = lambda: account_store
    app.dependency_overrides[get_email_sender] = lambda: mailer
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(overrides):
    """Async HTTP client bound to the app, backed by the in-memory stores."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def ws_client(overrides):
    return TestClient(app)
