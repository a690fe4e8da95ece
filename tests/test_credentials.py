"""
Tests for username/password verification.
"""

import pytest
from unittest.mock import AsyncMock, patch

from auth.credentials import CredentialVerifier
from auth.errors import LOGIN_FAILED_MESSAGE, BadSecret, NotFound, StoreUnavailable


class TestCredentialVerifier:
    @pytest.mark.asyncio
    async def test_correct_password(self, alice, store):
        user = await CredentialVerifier(store).verify("alice", "correct")
        assert user is alice

    @pytest.mark.asyncio
    async def test_wrong_password(self, store):
        with pytest.raises(BadSecret):
            await CredentialVerifier(store).verify("alice", "wrong")

    @pytest.mark.asyncio
    async def test_unknown_user(self, store):
        with pytest.raises(NotFound):
            await CredentialVerifier(store).verify("bob", "correct")

    @pytest.mark.asyncio
    async def test_lookup_is_case_sensitive(self, store):
        with pytest.raises(NotFound):
            await CredentialVerifier(store).verify("Alice", "correct")

    @pytest.mark.asyncio
    async def test_failures_share_one_message(self, store):
        verifier = CredentialVerifier(store)
        with pytest.raises(NotFound) as missing:
            await verifier.verify("bob", "correct")
        with pytest.raises(BadSecret) as wrong:
            await verifier.verify("alice", "wrong")
        assert missing.value.message == wrong.value.message == LOGIN_FAILED_MESSAGE
        assert missing.value.status_code == wrong.value.status_code == 400

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        broken = AsyncMock()
        broken.find_by_identifier.side_effect = StoreUnavailable()
        with pytest.raises(StoreUnavailable):
            await CredentialVerifier(broken).verify("alice", "correct")

    @pytest.mark.asyncio
    async def test_unknown_user_still_checks_a_hash(self, store):
        with patch("auth.password.bcrypt.checkpw", return_value=False) as checkpw:
            with pytest.raises(NotFound):
                await CredentialVerifier(store).verify("bob", "correct")
        checkpw.assert_called_once()
