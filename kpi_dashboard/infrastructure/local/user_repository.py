"""
SQLite implementation of user repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, select

from kpi_dashboard.core.exceptions import DuplicateError, NotFoundError
from kpi_dashboard.infrastructure.local.database import UserORM, get_session_factory
from kpi_dashboard.interfaces.user_repository import IUserRepository
from kpi_dashboard.models.enums import Role
from kpi_dashboard.models.user import User, UserCreate, UserUpdate
from kpi_dashboard.utils.datetime_utils import now_utc

_PASSWORD_FIELDS = {"password", "current_password"}


class SqliteUserRepository(IUserRepository):
    """SQLite implementation of user repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: UserORM) -> User:
        return User(
            id=UUID(orm.id),
            full_name=orm.full_name,
            email=orm.email,
            role=Role(orm.role),
            team_id=UUID(orm.team_id) if orm.team_id else None,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def _email_taken(self, session, email: str, exclude_id: Optional[UUID] = None) -> bool:
        query = select(UserORM.id).where(UserORM.email == email)
        if exclude_id:
            query = query.where(UserORM.id != str(exclude_id))
        result = await session.execute(query)
        return result.first() is not None

    async def create(self, user: UserCreate, password_hash: Optional[str] = None) -> User:
        async with self._session_factory() as session:
            if await self._email_taken(session, user.email):
                raise DuplicateError(f"Email {user.email} is already registered")
            orm = UserORM(
                id=str(uuid4()),
                full_name=user.full_name,
                email=user.email,
                role=user.role.value,
                team_id=str(user.team_id) if user.team_id else None,
                password_hash=password_hash,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def create_many(self, users: list[tuple[UserCreate, Optional[str]]]) -> list[User]:
        async with self._session_factory() as session:
            seen: set[str] = set()
            for user, _ in users:
                if user.email in seen or await self._email_taken(session, user.email):
                    raise DuplicateError(f"Email {user.email} is already registered")
                seen.add(user.email)
            orms = [
                UserORM(
                    id=str(uuid4()),
                    full_name=user.full_name,
                    email=user.email,
                    role=user.role.value,
                    team_id=str(user.team_id) if user.team_id else None,
                    password_hash=password_hash,
                )
                for user, password_hash in users
            ]
            session.add_all(orms)
            await session.commit()
            for orm in orms:
                await session.refresh(orm)
            return [self._orm_to_model(orm) for orm in orms]

    async def get(self, user_id: UUID) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.email == email)
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list(self, team_id: Optional[UUID] = None, role: Optional[Role] = None) -> list[User]:
        async with self._session_factory() as session:
            conditions = []
            if team_id:
                conditions.append(UserORM.team_id == str(team_id))
            if role:
                conditions.append(UserORM.role == role.value)
            query = select(UserORM)
            if conditions:
                query = query.where(and_(*conditions))
            result = await session.execute(query.order_by(UserORM.full_name))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, user_id: UUID, update: UserUpdate) -> User:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"User {user_id} not found")

            update_data = update.model_dump(exclude_unset=True, exclude=_PASSWORD_FIELDS)
            if "email" in update_data and update_data["email"] is not None:
                if await self._email_taken(session, update_data["email"], exclude_id=user_id):
                    raise DuplicateError(f"Email {update_data['email']} is already registered")
            for field, value in update_data.items():
                if field in ("full_name", "email", "role") and value is None:
                    continue
                if isinstance(value, Role):
                    value = value.value
                elif isinstance(value, UUID):
                    value = str(value)
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get_password_hash(self, user_id: UUID) -> Optional[str]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM.password_hash).where(UserORM.id == str(user_id))
            )
            return result.scalar_one_or_none()

    async def set_password_hash(self, user_id: UUID, password_hash: str) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"User {user_id} not found")
            orm.password_hash = password_hash
            orm.updated_at = now_utc()
            await session.commit()

    async def delete(self, user_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    async def delete_many(self, user_ids: list[UUID]) -> list[User]:
        if not user_ids:
            return []
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id.in_([str(i) for i in user_ids]))
            )
            orms = list(result.scalars().all())
            deleted = [self._orm_to_model(orm) for orm in orms]
            for orm in orms:
                await session.delete(orm)
            await session.commit()
            return deleted
