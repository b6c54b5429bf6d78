# app/accounts.py
"""Account sign-up: email a verification token, then let the holder set a password.

Accounts are independent of leaderboard entries; a player name on the
leaderboard is only a display label.
"""

from datetime import datetime, timedelta, timezone
import logging

from app import config
from app.mailer import EmailSender
from app.models import EmailToken, TokenInfo, User
from app.security import generate_verification_token, hash_password, verify_password
from app.storage.base import AccountStore, DuplicateEntryError

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """A sign-up or verification request that cannot be honoured."""


class InvalidCredentials(AccountError):
    pass


class AccountService:
    def __init__(self, store: AccountStore, mailer: EmailSender):
        self.store = store
        self.mailer = mailer

    async def create_account(self, username: str, email: str) -> EmailToken:
        if await self.store.find_user_by_username(username):
            raise AccountError("Username already exists")
        if await self.store.find_user_by_email(email):
            raise AccountError("Email already registered")

        now = datetime.now(timezone.utc)
        token = EmailToken(
            email=email,
            username=username,
            token=generate_verification_token(),
            expiresAt=now + timedelta(hours=config.EMAIL_TOKEN_TTL_HOURS),
            createdAt=now,
        )
        await self.store.insert_token(token)

        if not await self.mailer.send_verification(email, username, token.token):
            await self.store.delete_token(token.token)
            raise AccountError("Failed to send verification email")

        logger.info(f"Verification token issued for '{username}'")
        return token

    async def verify_token(self, token: str) -> TokenInfo:
        record = await self.store.find_token(token)
        if record is None:
            raise AccountError("Invalid or expired token")
        if record.expiresAt <= datetime.now(timezone.utc):
            await self.store.delete_token(token)
            raise AccountError("Invalid or expired token")
        return TokenInfo(email=record.email, username=record.username, expiresAt=record.expiresAt)

    async def set_password(self, token: str, password: str) -> User:
        info = await self.verify_token(token)
        try:
            user = await self.store.insert_user(info.username, info.email, hash_password(password))
        except DuplicateEntryError:
            raise AccountError("Username or email already registered") from None

        await self.store.delete_token(token)
        logger.info(f"Account created for '{user.username}'")
        return user

    async def login(self, email: str, password: str) -> User:
        credentials = await self.store.find_credentials(email)
        if credentials is None or not verify_password(password, credentials[1]):
            logger.warning(f"Login failed for: {email}")
            raise InvalidCredentials("Invalid email or password")
        return credentials[0]
