"""
Read-only user lookups used by the auth core.

The core only ever needs two reads, so it depends on the small
``UserStore`` protocol; ``SqlUserStore`` implements it on top of the
request's ``AsyncSession``.  Driver and connection failures surface as
``StoreUnavailable``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import StoreUnavailable
from database.helpers import get_user_by_id, get_user_by_username
from database.models import User

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    async def find_by_identifier(self, identifier: str) -> Optional[User]: ...

    async def find_by_id(self, user_id: str) -> Optional[User]: ...


class SqlUserStore:
    """``UserStore`` backed by the ``users`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        try:
            return await get_user_by_username(self._session, identifier)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            logger.error("User lookup by username failed: %s", exc)
            raise StoreUnavailable() from exc

    async def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            uid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        try:
            return await get_user_by_id(self._session, uid)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            logger.error("User lookup by id failed: %s", exc)
            raise StoreUnavailable() from exc
