"""Password hashing helpers built on bcrypt."""

import bcrypt
from fastapi import HTTPException

from src.pricehub.runtime.context import get_config

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password with a fresh salt.

    Args:
        password: Plain-text password (may be empty)
        rounds: bcrypt cost factor; defaults to ``security.bcrypt_rounds``

    Returns:
        A ``$2b$`` bcrypt hash string
    """
    cost = rounds or get_config().security.bcrypt_rounds
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Returns False for empty or malformed hashes instead of raising.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


def ensure_password_strength(password: str) -> None:
    """Reject passwords shorter than ``security.min_password_length`` with HTTP 400."""
    min_length = get_config().security.min_password_length
    if len(password) < min_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {min_length} characters long",
        )
