"""
JWT creation and verification.

Tokens are standard HS256 JWTs (``header.payload.signature``) carrying
``sub`` (username), ``uid`` (user id), ``iat`` and ``exp``.  The signing
secret is passed in at construction; ``get_token_issuer`` /
``get_token_verifier`` in ``auth.dependencies`` wire it from
``config.jwt_secret`` (env var: ``JWT_SECRET``).

Tokens are stateless: nothing is stored server-side and there is no
revocation list, so a token stays valid until ``exp``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import Expired, InvalidSignature, UnknownSubject
from auth.store import UserStore
from database.models import User

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY = timedelta(days=7)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Token:
    subject: str
    user_id: str
    issued_at: datetime
    expires_at: datetime
    encoded: str = ""

    def __str__(self) -> str:
        return self.encoded


class TokenIssuer:
    """Mints signed, expiring bearer tokens for a user record."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = DEFAULT_EXPIRY,
        clock: Clock = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in
        self._clock = clock

    def issue(self, user: User) -> Token:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._expires_in
        claims: Dict[str, Any] = {
            "sub": user.username,
            "uid": str(user.user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        encoded = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        return Token(
            subject=user.username,
            user_id=str(user.user_id),
            issued_at=issued_at,
            expires_at=expires_at,
            encoded=encoded,
        )


class TokenVerifier:
    """
    Validates bearer tokens and resolves them to the current user record.

    ``verify`` always re-reads the user from the store, so a deleted user's
    token stops working immediately.  A revocation check, if one is ever
    added, belongs in ``verify`` after ``decode``.
    """

    def __init__(
        self,
        secret: str,
        store: UserStore,
        algorithm: str = "HS256",
        clock: Clock = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._store = store
        self._algorithm = algorithm
        self._clock = clock

    def decode(self, token: str) -> Token:
        """Check signature and expiry; raise ``InvalidSignature`` / ``Expired``."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
            claims = Token(
                subject=payload["sub"],
                user_id=str(payload["uid"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                encoded=token,
            )
        except ExpiredSignatureError as exc:
            raise Expired() from exc
        except (JWTError, KeyError, TypeError, ValueError, OverflowError) as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidSignature() from exc

        if self._clock() > claims.expires_at:
            raise Expired()
        return claims

    async def verify(self, token: str) -> User:
        claims = self.decode(token)
        user = await self._store.find_by_id(claims.user_id)
        if user is None:
            logger.warning("Token subject %r no longer exists", claims.subject)
            raise UnknownSubject()
        return user
