"""
SQLite implementations of the activity and audit log repositories.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from sqlalchemy import select

from kpi_dashboard.infrastructure.local.database import (
    ActivityLogORM,
    AuditLogORM,
    get_session_factory,
)
from kpi_dashboard.interfaces.log_repository import IActivityLogRepository, IAuditLogRepository
from kpi_dashboard.models.logs import ActivityLog, ActivityLogCreate, AuditLog, AuditLogCreate
from kpi_dashboard.utils.datetime_utils import now_utc


class SqliteActivityLogRepository(IActivityLogRepository):
    """SQLite implementation of the activity log."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def add(self, log: ActivityLogCreate) -> ActivityLog:
        async with self._session_factory() as session:
            orm = ActivityLogORM(
                id=str(uuid4()),
                timestamp=now_utc(),
                user_id=str(log.user_id) if log.user_id else None,
                user_full_name=log.user_full_name,
                action=log.action,
                affected_table=log.affected_table,
                record_id=log.record_id,
                details=log.details,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return ActivityLog.model_validate(orm, from_attributes=True)

    async def list(self, limit: Optional[int] = None) -> list[ActivityLog]:
        async with self._session_factory() as session:
            query = select(ActivityLogORM).order_by(ActivityLogORM.timestamp.desc())
            if limit:
                query = query.limit(limit)
            result = await session.execute(query)
            return [ActivityLog.model_validate(orm, from_attributes=True) for orm in result.scalars().all()]


class SqliteAuditLogRepository(IAuditLogRepository):
    """SQLite implementation of the KPI audit trail."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    async def add(self, log: AuditLogCreate) -> AuditLog:
        async with self._session_factory() as session:
            orm = AuditLogORM(
                id=str(uuid4()),
                timestamp=now_utc(),
                user_id=str(log.user_id) if log.user_id else None,
                user_full_name=log.user_full_name,
                action=log.action.value,
                agent_name=log.agent_name,
                team_name=log.team_name,
                kpi_date=log.kpi_date,
                changes=[change.model_dump() for change in log.changes],
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return AuditLog.model_validate(orm, from_attributes=True)

    async def list(self, limit: Optional[int] = None) -> list[AuditLog]:
        async with self._session_factory() as session:
            query = select(AuditLogORM).order_by(AuditLogORM.timestamp.desc())
            if limit:
                query = query.limit(limit)
            result = await session.execute(query)
            return [AuditLog.model_validate(orm, from_attributes=True) for orm in result.scalars().all()]
