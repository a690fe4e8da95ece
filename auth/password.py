"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

from auth.errors import HashingError, VerificationError
from config.settings import config

# bcrypt only looks at the first 72 bytes of a secret
_MAX_SECRET_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt (auto-salted, work factor from config)."""
    raw = password.encode()
    if len(raw) > _MAX_SECRET_BYTES or b"\x00" in raw:
        raise HashingError("Password is too long or contains NUL bytes")
    try:
        salt = bcrypt.gensalt(rounds=rounds or config.bcrypt_rounds)
        return bcrypt.hashpw(raw, salt).decode()
    except (ValueError, TypeError) as exc:
        raise HashingError(f"Password could not be hashed: {exc}") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """
    Constant-time comparison against a bcrypt hash.

    Returns ``False`` on mismatch.  Raises ``VerificationError`` when the
    stored hash itself is not a bcrypt hash.
    """
    raw = password.encode()
    if len(raw) > _MAX_SECRET_BYTES or b"\x00" in raw:
        # hash_password never accepts these, so nothing stored can match
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode())
    except (ValueError, TypeError) as exc:
        raise VerificationError() from exc
