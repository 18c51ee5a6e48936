"""
Password hashing and session token minting.
"""

import secrets
from functools import lru_cache

from passlib.context import CryptContext

DEFAULT_HASH_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of the secret
_BCRYPT_MAX_BYTES = 72


@lru_cache(maxsize=None)
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def _truncate(plain: str) -> str:
    encoded = plain.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        return encoded[:_BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")
    return plain


def hash_password(plain: str, rounds: int = DEFAULT_HASH_ROUNDS) -> str:
    """Return a one-way bcrypt digest of ``plain`` with cost factor ``rounds``."""
    return _pwd_context(rounds).hash(_truncate(plain))


def verify_password(plain: str, hashed: str) -> bool:
    # the cost factor is read from the digest itself
    return _pwd_context(DEFAULT_HASH_ROUNDS).verify(_truncate(plain), hashed)


def new_session_token() -> str:
    """Mint an opaque, cryptographically random session token."""
    return secrets.token_urlsafe(32)
