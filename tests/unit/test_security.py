"""
Unit tests for password hashing and local JWTs.
"""

from uuid import uuid4

import pytest

from kpi_dashboard.core.config import Settings
from kpi_dashboard.core.exceptions import AuthenticationError
from kpi_dashboard.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from kpi_dashboard.infrastructure.auth.local_auth import LocalAuthProvider
from tests.helpers import make_user


@pytest.fixture
def settings():
    return Settings(LOCAL_JWT_SECRET="test-secret", LOCAL_JWT_ISSUER="kpi-test")


class TestPasswords:
    def test_round_trip(self):
        stored = hash_password("123456", iterations=1000)
        assert verify_password("123456", stored)
        assert not verify_password("654321", stored)

    def test_hashes_are_salted(self):
        assert hash_password("123456", iterations=1000) != hash_password("123456", iterations=1000)

    @pytest.mark.parametrize("stored", ["", "plain", "md5$1$abc$def", "pbkdf2_sha256$x$y$z"])
    def test_malformed_hash_never_verifies(self, stored):
        assert not verify_password("123456", stored)


class TestTokens:
    def test_subject_round_trip(self, settings):
        user_id = str(uuid4())
        assert decode_access_token(create_access_token(user_id, settings), settings) == user_id

    def test_expired_token_is_rejected(self, settings):
        token = create_access_token(str(uuid4()), settings, expires_minutes=-5)
        with pytest.raises(AuthenticationError):
            decode_access_token(token, settings)

    def test_wrong_secret_is_rejected(self, settings):
        token = create_access_token(str(uuid4()), settings)
        other = Settings(LOCAL_JWT_SECRET="other-secret", LOCAL_JWT_ISSUER="kpi-test")
        with pytest.raises(AuthenticationError):
            decode_access_token(token, other)

    def test_wrong_issuer_is_rejected(self, settings):
        token = create_access_token(str(uuid4()), settings)
        other = Settings(LOCAL_JWT_SECRET="test-secret", LOCAL_JWT_ISSUER="someone-else")
        with pytest.raises(AuthenticationError):
            decode_access_token(token, other)


class FakeUserRepo:
    def __init__(self, users):
        self.users = {user.id: user for user in users}

    async def get(self, user_id):
        return self.users.get(user_id)


class TestLocalAuthProvider:
    @pytest.mark.asyncio
    async def test_resolves_token_subject(self, settings):
        user = make_user()
        provider = LocalAuthProvider(settings, FakeUserRepo([user]))
        token = create_access_token(str(user.id), settings)
        assert (await provider.verify_token(token)).id == user.id

    @pytest.mark.asyncio
    async def test_unknown_user(self, settings):
        provider = LocalAuthProvider(settings, FakeUserRepo([]))
        with pytest.raises(AuthenticationError):
            await provider.verify_token(create_access_token(str(uuid4()), settings))

    @pytest.mark.asyncio
    async def test_subject_must_be_a_uuid(self, settings):
        provider = LocalAuthProvider(settings, FakeUserRepo([]))
        with pytest.raises(AuthenticationError):
            await provider.verify_token(create_access_token("not-a-uuid", settings))

    def test_refuses_empty_secret(self):
        with pytest.raises(ValueError, match="LOCAL_JWT_SECRET"):
            LocalAuthProvider(Settings(LOCAL_JWT_SECRET=""), FakeUserRepo([]))
