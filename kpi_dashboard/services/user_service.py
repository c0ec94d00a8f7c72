"""
User and team management service.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Iterable, Optional
from uuid import UUID

from kpi_dashboard.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from kpi_dashboard.core.security import hash_password, verify_password
from kpi_dashboard.interfaces.team_repository import ITeamRepository
from kpi_dashboard.interfaces.user_repository import IUserRepository
from kpi_dashboard.models.enums import Role
from kpi_dashboard.models.team import Team, TeamCreate, TeamUpdate
from kpi_dashboard.models.user import User, UserCreate, UserUpdate
from kpi_dashboard.services.activity_log_service import ActivityLogger

logger = logging.getLogger(__name__)

IMPORT_COLUMNS = ("full_name", "email", "password", "role", "team_name")


class UserService:
    """User accounts, passwords and login."""

    def __init__(
        self,
        user_repo: IUserRepository,
        team_repo: ITeamRepository,
        activity: Optional[ActivityLogger] = None,
    ):
        self.user_repo = user_repo
        self.team_repo = team_repo
        self.activity = activity

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.user_repo.get_by_email(email)
        stored = await self.user_repo.get_password_hash(user.id) if user else None
        if not user or not stored or not verify_password(password, stored):
            logger.info(f"Failed login for {email}")
            raise AuthenticationError("Invalid email or password")
        if self.activity:
            await self.activity.record(user, "LOGIN", "users", str(user.id), "User logged in")
        return user

    async def get(self, user_id: UUID) -> User:
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def list(self, team_id: Optional[UUID] = None, role: Optional[Role] = None) -> list[User]:
        return await self.user_repo.list(team_id=team_id, role=role)

    async def create(self, data: UserCreate, actor: Optional[User] = None) -> User:
        await self._ensure_team(data.team_id)
        password_hash = hash_password(data.password) if data.password else None
        user = await self.user_repo.create(data, password_hash=password_hash)
        if self.activity:
            await self.activity.record(
                actor, "CREATE_USER", "users", str(user.id), f"Created user {user.full_name}"
            )
        return user

    async def update(self, user_id: UUID, update: UserUpdate, actor: Optional[User] = None) -> User:
        await self.get(user_id)
        if "team_id" in update.model_fields_set:
            await self._ensure_team(update.team_id)

        if update.password:
            await self._check_current_password(user_id, update, actor)

        user = await self.user_repo.update(user_id, update)
        if update.password:
            await self.user_repo.set_password_hash(user_id, hash_password(update.password))
        if self.activity:
            await self.activity.record(
                actor, "UPDATE_USER", "users", str(user_id), f"Updated user {user.full_name}"
            )
        return user

    async def delete(self, user_id: UUID, actor: Optional[User] = None) -> None:
        user = await self.get(user_id)
        await self.user_repo.delete(user_id)
        if self.activity:
            await self.activity.record(
                actor, "DELETE_USER", "users", str(user_id), f"Deleted user {user.full_name}"
            )

    async def bulk_create(self, users: list[UserCreate], actor: Optional[User] = None) -> list[User]:
        """Create every user or none of them."""
        for team_id in {data.team_id for data in users}:
            await self._ensure_team(team_id)
        created = await self.user_repo.create_many(
            [(data, hash_password(data.password) if data.password else None) for data in users]
        )
        if self.activity:
            await self.activity.record(
                actor, "BULK_CREATE_USERS", "users", "", f"Imported {len(created)} users."
            )
        return created

    async def bulk_delete(self, user_ids: Iterable[UUID], actor: Optional[User] = None) -> list[User]:
        deleted = await self.user_repo.delete_many(list(dict.fromkeys(user_ids)))
        if self.activity:
            names = ", ".join(user.full_name for user in deleted)
            await self.activity.record(
                actor,
                "BULK_DELETE_USERS",
                "users",
                "",
                f"Deleted {len(deleted)} users: {names}",
            )
        return deleted

    async def import_csv(self, text: str, actor: Optional[User] = None) -> list[User]:
        """Create users from ``full_name,email,password,role,team_name`` rows (header first)."""
        teams = {team.name.lower(): team.id for team in await self.team_repo.list()}
        users = parse_user_import(text, teams)
        if not users:
            return []
        return await self.bulk_create(users, actor)

    async def _ensure_team(self, team_id: Optional[UUID]) -> None:
        if team_id and not await self.team_repo.get(team_id):
            raise NotFoundError(f"Team {team_id} not found")

    async def _check_current_password(self, user_id: UUID, update: UserUpdate, actor: Optional[User]) -> None:
        stored = await self.user_repo.get_password_hash(user_id)
        if not stored:
            return
        changing_own = actor is not None and actor.id == user_id
        if update.current_password is None:
            if changing_own:
                raise ValidationError("Current password is required")
            return
        if not verify_password(update.current_password, stored):
            raise ValidationError("Current password does not match")


def parse_user_import(text: str, team_ids_by_name: dict[str, UUID]) -> list[UserCreate]:
    """
    Parse a user import CSV.

    Blank lines are skipped. Row numbers in errors count the header as row 1.

    Raises:
        ValidationError: Missing fields, an unknown role or an unknown team
    """
    roles = {role.value: role for role in Role}
    users: list[UserCreate] = []
    reader = csv.reader(io.StringIO(text))
    next(reader, None)
    for row_number, row in enumerate(reader, start=2):
        if not any(cell.strip() for cell in row):
            continue
        cells = [cell.strip() for cell in row] + [""] * len(IMPORT_COLUMNS)
        full_name, email, password, role, team_name = cells[: len(IMPORT_COLUMNS)]
        if not full_name or not email or not password or not role:
            raise ValidationError(
                f"Row {row_number}: Missing required fields (full_name, email, password, role)."
            )
        if role not in roles:
            raise ValidationError(f"Row {row_number}: Invalid role '{role}'.")
        team_id = None
        if team_name:
            team_id = team_ids_by_name.get(team_name.lower())
            if team_id is None:
                raise ValidationError(f"Row {row_number}: Team '{team_name}' not found.")
        users.append(
            UserCreate(full_name=full_name, email=email, password=password, role=roles[role], team_id=team_id)
        )
    return users


class TeamService:
    """Team management."""

    def __init__(
        self,
        team_repo: ITeamRepository,
        user_repo: IUserRepository,
        activity: Optional[ActivityLogger] = None,
    ):
        self.team_repo = team_repo
        self.user_repo = user_repo
        self.activity = activity

    async def list(self) -> list[Team]:
        return await self.team_repo.list()

    async def get(self, team_id: UUID) -> Team:
        team = await self.team_repo.get(team_id)
        if not team:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    async def members(self, team_id: UUID) -> list[User]:
        await self.get(team_id)
        return await self.user_repo.list(team_id=team_id)

    async def create(self, data: TeamCreate, actor: Optional[User] = None) -> Team:
        team = await self.team_repo.create(data)
        if self.activity:
            await self.activity.record(
                actor, "CREATE_TEAM", "teams", str(team.id), f"Created team {team.name}"
            )
        return team

    async def update(self, team_id: UUID, update: TeamUpdate, actor: Optional[User] = None) -> Team:
        """Rename a team or reassign its leader and assistant.

        Existing entries keep the team name they were logged under.
        """
        before = await self.get(team_id)
        team = await self.team_repo.update(team_id, update)
        if self.activity:
            if team.name != before.name:
                await self.activity.record(
                    actor,
                    "RENAME_TEAM",
                    "teams",
                    str(team_id),
                    f"Renamed team from {before.name} to {team.name}",
                )
            else:
                await self.activity.record(
                    actor, "UPDATE_TEAM", "teams", str(team_id), f"Updated team {team.name}"
                )
        return team
