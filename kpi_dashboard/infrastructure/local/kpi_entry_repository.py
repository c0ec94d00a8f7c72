"""
SQLite implementation of KPI entry repository.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import delete as sa_delete
from sqlalchemy import select

from kpi_dashboard.core.exceptions import NotFoundError
from kpi_dashboard.infrastructure.local.database import KpiEntryORM, get_session_factory
from kpi_dashboard.interfaces.kpi_entry_repository import IKpiEntryRepository
from kpi_dashboard.models.enums import TaskName
from kpi_dashboard.models.kpi_entry import KpiEntry, KpiEntryCreate, KpiEntryUpdate
from kpi_dashboard.utils.datetime_utils import now_utc

_NON_NULLABLE = {
    "agent_name",
    "team",
    "date",
    "task",
    "duty_hours",
    "attendance",
    "login",
    "remarks",
    "custom_fields",
}


class SqliteKpiEntryRepository(IKpiEntryRepository):
    """SQLite implementation of KPI entry repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: KpiEntryORM) -> KpiEntry:
        """Convert ORM object to Pydantic model."""
        return KpiEntry.model_validate(orm, from_attributes=True)

    async def create(self, entry: KpiEntryCreate) -> KpiEntry:
        async with self._session_factory() as session:
            data = entry.model_dump(mode="json")
            orm = KpiEntryORM(
                **{**data, "date": entry.date},
                id=str(uuid4()),
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, entry_id: UUID) -> Optional[KpiEntry]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KpiEntryORM).where(KpiEntryORM.id == str(entry_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list(
        self,
        user_id: Optional[UUID] = None,
        team: Optional[str] = None,
        task: Optional[TaskName] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[KpiEntry]:
        async with self._session_factory() as session:
            query = select(KpiEntryORM)
            if user_id:
                query = query.where(KpiEntryORM.user_id == str(user_id))
            if team is not None:
                query = query.where(KpiEntryORM.team == team)
            if task:
                query = query.where(KpiEntryORM.task == task.value)
            if date_from:
                query = query.where(KpiEntryORM.date >= date_from)
            if date_to:
                query = query.where(KpiEntryORM.date <= date_to)
            query = query.order_by(KpiEntryORM.date.desc(), KpiEntryORM.created_at.desc())
            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, entry_id: UUID, update: KpiEntryUpdate) -> KpiEntry:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KpiEntryORM).where(KpiEntryORM.id == str(entry_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"KPI entry {entry_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field in _NON_NULLABLE:
                    continue
                if hasattr(value, "value"):
                    value = value.value
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, entry_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KpiEntryORM).where(KpiEntryORM.id == str(entry_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    async def delete_many(self, entry_ids: list[UUID]) -> int:
        if not entry_ids:
            return 0
        async with self._session_factory() as session:
            result = await session.execute(
                sa_delete(KpiEntryORM).where(KpiEntryORM.id.in_([str(i) for i in entry_ids]))
            )
            await session.commit()
            return result.rowcount or 0
