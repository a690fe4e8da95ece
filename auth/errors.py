"""
Authentication error taxonomy.

Every error carries the HTTP ``status_code`` it maps to and a ``message``
safe to return to the client.  The handler registered in ``main.py``
turns any ``AuthError`` into ``{"message": ...}``.
"""

from __future__ import annotations

from fastapi import status

LOGIN_FAILED_MESSAGE = "Incorrect username or password."


class AuthError(Exception):
    """Base class for everything raised by the auth subsystem."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Required request fields are missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Username and Password are required"


# ── Credential / token failures ──────────────────────────────────────────


class AuthFailure(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class NotFound(AuthFailure):
    status_code = status.HTTP_400_BAD_REQUEST
    message = LOGIN_FAILED_MESSAGE


class BadSecret(AuthFailure):
    status_code = status.HTTP_400_BAD_REQUEST
    message = LOGIN_FAILED_MESSAGE


class MissingToken(AuthFailure):
    message = "Missing Bearer token"


class InvalidSignature(AuthFailure):
    message = "Invalid token"


class Expired(AuthFailure):
    message = "Token expired"


class UnknownSubject(AuthFailure):
    message = "Token subject no longer exists"


# ── Internal failures (500) ──────────────────────────────────────────────


class StoreUnavailable(AuthError):
    message = "User store unavailable"


class HashingError(AuthError):
    message = "Password could not be hashed"


class VerificationError(AuthError):
    message = "Stored password hash is malformed"
