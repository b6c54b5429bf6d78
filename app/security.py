# app/security.py

from passlib.context import CryptContext
import hashlib
import secrets

# Configure the password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _prepare_secret(password: str) -> str:
    """Pre-hash secrets bcrypt would silently truncate into a 64-char SHA-256 digest."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_secret(password))


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(_prepare_secret(password), password_hash)


def generate_verification_token() -> str:
    """32 random bytes, hex encoded."""
    return secrets.token_hex(32)
