"""
User repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from kpi_dashboard.models.enums import Role
from kpi_dashboard.models.user import User, UserCreate, UserUpdate


class IUserRepository(ABC):
    """Interface for user account persistence."""

    @abstractmethod
    async def create(self, user: UserCreate, password_hash: Optional[str] = None) -> User:
        """Create a user. Raises DuplicateError when the email is taken."""
        pass

    @abstractmethod
    async def create_many(self, users: list[tuple[UserCreate, Optional[str]]]) -> list[User]:
        """Create (user, password_hash) pairs in one transaction. Nothing is written on a duplicate email."""
        pass

    @abstractmethod
    async def get(self, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def list(self, team_id: Optional[UUID] = None, role: Optional[Role] = None) -> list[User]:
        pass

    @abstractmethod
    async def update(self, user_id: UUID, update: UserUpdate) -> User:
        """Update profile fields. Password fields are ignored here."""
        pass

    @abstractmethod
    async def get_password_hash(self, user_id: UUID) -> Optional[str]:
        pass

    @abstractmethod
    async def set_password_hash(self, user_id: UUID, password_hash: str) -> None:
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        pass

    @abstractmethod
    async def delete_many(self, user_ids: list[UUID]) -> list[User]:
        """Delete several users and return the ones that existed."""
        pass
