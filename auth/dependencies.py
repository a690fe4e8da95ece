"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_token_issuer``, ``get_token_verifier``,
``get_auth_gate`` and ``get_current_identity``
dependencies that are used across all protected routes.
"""

from __future__ import annotations

from datetime import timedelta
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.credentials import CredentialVerifier
from auth.gate import AuthenticatedIdentity, AuthGate
from auth.jwt import TokenIssuer, TokenVerifier
from auth.store import SqlUserStore, UserStore
from config.settings import config
from database.session import get_db_session


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_user_store(session: AsyncSession = Depends(db_session)) -> UserStore:
    return SqlUserStore(session)


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        config.jwt_secret.get_secret_value(),
        algorithm=config.jwt_algorithm,
        expires_in=timedelta(seconds=config.jwt_expiry_seconds),
    )


def get_token_verifier(store: UserStore = Depends(get_user_store)) -> TokenVerifier:
    return TokenVerifier(
        config.jwt_secret.get_secret_value(),
        store,
        algorithm=config.jwt_algorithm,
    )


def get_auth_gate(
    store: UserStore = Depends(get_user_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthGate:
    return AuthGate(CredentialVerifier(store), issuer, verifier)


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    gate: AuthGate = Depends(get_auth_gate),
) -> AuthenticatedIdentity:
    """
    Verify the Bearer token and attach the resolved identity to
    ``request.state.identity``.
    """
    identity = await gate.authenticate(authorization)
    request.state.identity = identity
    return identity
