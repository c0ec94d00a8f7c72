"""
Local password authentication provider.
"""

from __future__ import annotations

from uuid import UUID

from kpi_dashboard.core.config import Settings
from kpi_dashboard.core.exceptions import AuthenticationError
from kpi_dashboard.core.security import decode_access_token
from kpi_dashboard.interfaces.auth_provider import IAuthProvider
from kpi_dashboard.interfaces.user_repository import IUserRepository
from kpi_dashboard.models.user import User


class LocalAuthProvider(IAuthProvider):
    """Local auth provider with HMAC JWT validation."""

    def __init__(self, settings: Settings, user_repo: IUserRepository):
        if not settings.LOCAL_JWT_SECRET:
            raise ValueError("LOCAL_JWT_SECRET must be set for local auth")
        self._settings = settings
        self._user_repo = user_repo

    async def verify_token(self, token: str) -> User:
        subject = decode_access_token(token, self._settings)
        try:
            user_id = UUID(subject)
        except ValueError as exc:
            raise AuthenticationError("Invalid subject") from exc
        user = await self._user_repo.get(user_id)
        if not user:
            raise AuthenticationError("User not found")
        return user
