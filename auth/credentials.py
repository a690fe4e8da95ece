"""
Username + password verification for the login flow.
"""

from __future__ import annotations

import logging

from auth.errors import BadSecret, NotFound
from auth.password import hash_password, verify_password
from auth.store import UserStore
from database.models import User

logger = logging.getLogger(__name__)

# checked against when the username is unknown so both failure paths pay for one bcrypt round
_DUMMY_HASH = hash_password("not-a-real-password")


class CredentialVerifier:
    """Looks a user up by username and checks the password against its hash.

    Unknown usernames and wrong passwords raise different exception types
    but carry the same public message, so the login response never tells
    a caller which usernames exist.
    """

    def __init__(self, store: UserStore) -> None:
        self._store = store

    async def verify(self, identifier: str, secret: str) -> User:
        user = await self._store.find_by_identifier(identifier)
        if user is None:
            verify_password(secret, _DUMMY_HASH)
            logger.warning("Login failed: unknown user %r", identifier)
            raise NotFound()

        if not verify_password(secret, user.password_hash):
            logger.warning("Login failed: bad password for %r", identifier)
            raise BadSecret()

        return user
