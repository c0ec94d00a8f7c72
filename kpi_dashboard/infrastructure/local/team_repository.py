"""
SQLite implementation of team repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from kpi_dashboard.core.exceptions import DuplicateError, NotFoundError
from kpi_dashboard.infrastructure.local.database import TeamORM, get_session_factory
from kpi_dashboard.interfaces.team_repository import ITeamRepository
from kpi_dashboard.models.team import Team, TeamCreate, TeamUpdate
from kpi_dashboard.utils.datetime_utils import now_utc


class SqliteTeamRepository(ITeamRepository):
    """SQLite implementation of team repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TeamORM) -> Team:
        return Team.model_validate(orm, from_attributes=True)

    async def _name_taken(self, session, name: str, exclude_id: Optional[UUID] = None) -> bool:
        query = select(TeamORM.id).where(TeamORM.name == name)
        if exclude_id:
            query = query.where(TeamORM.id != str(exclude_id))
        result = await session.execute(query)
        return result.first() is not None

    async def create(self, team: TeamCreate) -> Team:
        async with self._session_factory() as session:
            if await self._name_taken(session, team.name):
                raise DuplicateError(f"Team {team.name} already exists")
            orm = TeamORM(
                id=str(uuid4()),
                name=team.name,
                leader_id=str(team.leader_id) if team.leader_id else None,
                assistant_id=str(team.assistant_id) if team.assistant_id else None,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, team_id: UUID) -> Optional[Team]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(TeamORM).where(TeamORM.id == str(team_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list(self) -> list[Team]:
        async with self._session_factory() as session:
            result = await session.execute(select(TeamORM).order_by(TeamORM.name))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, team_id: UUID, update: TeamUpdate) -> Team:
        async with self._session_factory() as session:
            result = await session.execute(
                select(TeamORM).where(TeamORM.id == str(team_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"Team {team_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            if update_data.get("name"):
                if await self._name_taken(session, update_data["name"], exclude_id=team_id):
                    raise DuplicateError(f"Team {update_data['name']} already exists")
            for field, value in update_data.items():
                if field == "name" and value is None:
                    continue
                setattr(orm, field, str(value) if isinstance(value, UUID) else value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
