"""
Authentication provider interface.
"""

from abc import ABC, abstractmethod

from kpi_dashboard.models.user import User


class IAuthProvider(ABC):
    """Resolves a bearer token into a user account."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """Return the user for a token. Raises AuthenticationError when invalid."""
        pass
