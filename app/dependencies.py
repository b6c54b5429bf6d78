# app/dependencies.py
from functools import lru_cache

from fastapi import Depends

from app import config
from app.accounts import AccountService
from app.database import get_db
from app.leaderboard import LeaderboardService
from app.mailer import EmailSender, build_email_sender
from app.storage.base import AccountStore, LeaderboardStore
from app.storage.memory import InMemoryAccountStore, InMemoryLeaderboardStore
from app.storage.mongo import MongoAccountStore, MongoLeaderboardStore


@lru_cache
def _memory_leaderboard_store() -> InMemoryLeaderboardStore:
    return InMemoryLeaderboardStore()


@lru_cache
def _memory_account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


def get_leaderboard_store() -> LeaderboardStore:
    if config.STORAGE_BACKEND == "memory":
        return _memory_leaderboard_store()
    return MongoLeaderboardStore(get_db())


def get_account_store() -> AccountStore:
    if config.STORAGE_BACKEND == "memory":
        return _memory_account_store()
    return MongoAccountStore(get_db())


@lru_cache
def get_email_sender() -> EmailSender:
    return build_email_sender()


def get_leaderboard_service(store: LeaderboardStore = Depends(get_leaderboard_store)) -> LeaderboardService:
    return LeaderboardService(store)


def get_account_service(
    store: AccountStore = Depends(get_account_store),
    mailer: EmailSender = Depends(get_email_sender),
) -> AccountService:
    return AccountService(store, mailer)
