"""
Auth gate: the single entry point for both authentication flows.

* login:      credentials  → ``CredentialVerifier`` → ``TokenIssuer``
* protected:  bearer token → ``TokenVerifier``      → ``AuthenticatedIdentity``

Each call walks one ``AuthAttempt`` through
``UNAUTHENTICATED → VERIFYING → AUTHENTICATED | REJECTED``.  Nothing is
kept between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from auth.credentials import CredentialVerifier
from auth.errors import AuthError, MissingToken, ValidationError
from auth.jwt import Token, TokenIssuer, TokenVerifier
from database.models import User

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


_TRANSITIONS = {
    GateState.UNAUTHENTICATED: {GateState.VERIFYING, GateState.REJECTED},
    GateState.VERIFYING: {GateState.AUTHENTICATED, GateState.REJECTED},
    GateState.AUTHENTICATED: set(),
    GateState.REJECTED: set(),
}


@dataclass
class AuthAttempt:
    """State of one request passing through the gate."""

    state: GateState = GateState.UNAUTHENTICATED
    error: Optional[AuthError] = None

    def advance(self, new_state: GateState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal gate transition {self.state.value} -> {new_state.value}")
        self.state = new_state

    def reject(self, error: AuthError) -> AuthError:
        self.advance(GateState.REJECTED)
        self.error = error
        return error


@dataclass(frozen=True)
class AuthenticatedIdentity:
    user_id: str
    username: str
    email: str
    birthday: Optional[date]
    favorite_movies: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedIdentity":
        return cls(
            user_id=str(user.user_id),
            username=user.username,
            email=user.email,
            birthday=user.birthday,
            favorite_movies=tuple(str(m.movie_id) for m in user.favorite_movies),
        )


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: Token


def parse_bearer(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise MissingToken()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise MissingToken()
    return token


class AuthGate:
    def __init__(
        self,
        credentials: CredentialVerifier,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
    ) -> None:
        self._credentials = credentials
        self._issuer = issuer
        self._verifier = verifier

    async def login(self, identifier: Optional[str], secret: Optional[str]) -> LoginResult:
        attempt = AuthAttempt()
        if not identifier or not secret:
            raise attempt.reject(ValidationError())

        attempt.advance(GateState.VERIFYING)
        try:
            user = await self._credentials.verify(identifier, secret)
        except AuthError as exc:
            raise attempt.reject(exc)

        token = self._issuer.issue(user)
        attempt.advance(GateState.AUTHENTICATED)
        logger.info("Login: %s (%s)", user.username, user.user_id)
        return LoginResult(user=user, token=token)

    async def authenticate(self, authorization: Optional[str]) -> AuthenticatedIdentity:
        attempt = AuthAttempt()
        try:
            token = parse_bearer(authorization)
        except AuthError as exc:
            raise attempt.reject(exc)

        attempt.advance(GateState.VERIFYING)
        try:
            user = await self._verifier.verify(token)
        except AuthError as exc:
            raise attempt.reject(exc)

        attempt.advance(GateState.AUTHENTICATED)
        return AuthenticatedIdentity.from_user(user)
