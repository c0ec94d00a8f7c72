"""
Mock authentication provider for local development.
"""

from uuid import UUID

from kpi_dashboard.core.exceptions import AuthenticationError
from kpi_dashboard.interfaces.auth_provider import IAuthProvider
from kpi_dashboard.interfaces.user_repository import IUserRepository
from kpi_dashboard.models.user import User


class MockAuthProvider(IAuthProvider):
    """Mock auth provider: the bearer token is the user's ID or email."""

    def __init__(self, user_repo: IUserRepository):
        """
        Initialize mock auth provider.

        Args:
            user_repo: Repository used to resolve the token into a user
        """
        self._user_repo = user_repo

    async def verify_token(self, token: str) -> User:
        """
        Verify token - in mock mode, token is treated as user_id (or email).

        Args:
            token: User ID or email

        Returns:
            The matching user
        """
        if "@" in token:
            user = await self._user_repo.get_by_email(token)
        else:
            try:
                user_id = UUID(token)
            except ValueError as exc:
                raise AuthenticationError("Invalid mock token") from exc
            user = await self._user_repo.get(user_id)
        if not user:
            raise AuthenticationError("Unknown user")
        return user
