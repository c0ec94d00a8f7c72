"""
KPI entry service.

Create, edit and delete entries, scoped by the acting user's role, with an
activity record for every change and an audit trail of field-level diffs.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Optional
from uuid import UUID

from kpi_dashboard.core.exceptions import ForbiddenError, NotFoundError
from kpi_dashboard.interfaces.kpi_entry_repository import IKpiEntryRepository
from kpi_dashboard.interfaces.log_repository import IAuditLogRepository
from kpi_dashboard.interfaces.team_repository import ITeamRepository
from kpi_dashboard.models.enums import AuditAction, Role, TaskName
from kpi_dashboard.models.kpi_entry import KpiEntry, KpiEntryCreate, KpiEntryUpdate
from kpi_dashboard.models.logs import AuditLogCreate, FieldChange
from kpi_dashboard.models.user import User
from kpi_dashboard.services.activity_log_service import ActivityLogger
from kpi_dashboard.services.kpi_eligibility import is_call_center
from kpi_dashboard.services.permissions import TEAM_SCOPED_ROLES, ensure_can_view_entry
from kpi_dashboard.utils.datetime_utils import weekday_name

logger = logging.getLogger(__name__)

MISSING_VALUE = "N/A"
# Housekeeping columns are not part of the audit trail.
_UNAUDITED_FIELDS = {"id", "created_at", "updated_at", "custom_fields"}
# Call-center tasks never carry these.
_CALL_CENTER_CLEARED = ("target", "productivity")


def display_value(value: Any) -> str:
    """String form used for audit diffs; None is rendered as N/A."""
    if value is None:
        return MISSING_VALUE
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _audit_fields(entry: Optional[KpiEntry]) -> dict[str, Any]:
    if entry is None:
        return {}
    fields = {k: v for k, v in entry.model_dump().items() if k not in _UNAUDITED_FIELDS}
    for key, value in entry.custom_fields.items():
        fields[f"custom_fields.{key}"] = value
    return fields


def build_changes(before: Optional[KpiEntry], after: KpiEntry) -> list[FieldChange]:
    """
    Field-level diff between two versions of an entry.

    A field counts as changed when its string forms differ. With no
    ``before`` every populated field of ``after`` is reported.
    """
    old_fields = _audit_fields(before)
    new_fields = _audit_fields(after)
    changes: list[FieldChange] = []
    for field in list(new_fields) + [f for f in old_fields if f not in new_fields]:
        old_text = display_value(old_fields.get(field))
        new_text = display_value(new_fields.get(field))
        if old_text != new_text:
            changes.append(FieldChange(field=field, old_value=old_text, new_value=new_text))
    return changes


class KpiEntryService:
    """KPI entry use cases."""

    def __init__(
        self,
        entry_repo: IKpiEntryRepository,
        team_repo: ITeamRepository,
        audit_repo: IAuditLogRepository,
        activity: Optional[ActivityLogger] = None,
        audit_agent_changes: bool = False,
    ):
        self.entry_repo = entry_repo
        self.team_repo = team_repo
        self.audit_repo = audit_repo
        self.activity = activity
        self.audit_agent_changes = audit_agent_changes

    async def team_name_for(self, user: User) -> Optional[str]:
        if not user.team_id:
            return None
        team = await self.team_repo.get(user.team_id)
        return team.name if team else None

    async def get(self, entry_id: UUID, actor: Optional[User] = None) -> KpiEntry:
        entry = await self.entry_repo.get(entry_id)
        if not entry:
            raise NotFoundError(f"KPI entry {entry_id} not found")
        if actor is not None:
            ensure_can_view_entry(actor, entry, await self.team_name_for(actor))
        return entry

    async def list_visible(
        self,
        actor: User,
        user_id: Optional[UUID] = None,
        task: Optional[TaskName] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[KpiEntry]:
        """
        Entries the actor may see, newest date first.

        Agents only see their own entries, team leads and assistants their
        team's, owners and supervisors everything.
        """
        team: Optional[str] = None
        if actor.role == Role.AGENT:
            user_id = actor.id
        elif actor.role in TEAM_SCOPED_ROLES:
            team = await self.team_name_for(actor)
            if team is None:
                return []
        return await self.entry_repo.list(
            user_id=user_id, team=team, task=task, date_from=date_from, date_to=date_to
        )

    async def create(self, data: KpiEntryCreate, actor: Optional[User] = None) -> KpiEntry:
        if actor is not None and actor.role in TEAM_SCOPED_ROLES:
            if data.team != await self.team_name_for(actor):
                raise ForbiddenError("Entries can only be created for your own team")

        prepared = _prepare_create(data)
        entry = await self.entry_repo.create(prepared)
        logger.info(f"Created KPI entry {entry.id} for {entry.agent_name} on {entry.date}")

        if self.activity:
            await self.activity.record(
                actor,
                "CREATE_KPI",
                "kpis",
                str(entry.id),
                f"Created KPI entry for {entry.agent_name} on {entry.date.isoformat()}",
            )
        await self._audit(actor, None, entry)
        return entry

    async def update(self, entry_id: UUID, update: KpiEntryUpdate, actor: Optional[User] = None) -> KpiEntry:
        before = await self.get(entry_id, actor)
        if actor is not None and actor.role in TEAM_SCOPED_ROLES and "team" in update.model_fields_set:
            if update.team != await self.team_name_for(actor):
                raise ForbiddenError("Entries can only be moved within your own team")
        prepared = _prepare_update(before, update)
        after = await self.entry_repo.update(entry_id, prepared)
        logger.info(f"Updated KPI entry {entry_id}")

        if self.activity:
            await self.activity.record(
                actor,
                "UPDATE_KPI",
                "kpis",
                str(entry_id),
                f"Updated KPI entry for {after.agent_name} on {after.date.isoformat()}",
            )
        await self._audit(actor, before, after)
        return after

    async def delete(self, entry_id: UUID, actor: Optional[User] = None) -> None:
        entry = await self.get(entry_id, actor)
        await self.entry_repo.delete(entry_id)
        logger.info(f"Deleted KPI entry {entry_id}")
        if self.activity:
            await self.activity.record(
                actor,
                "DELETE_KPI",
                "kpis",
                str(entry_id),
                f"Deleted KPI entry for {entry.agent_name} on {entry.date.isoformat()}",
            )

    async def delete_many(self, entry_ids: Iterable[UUID], actor: Optional[User] = None) -> int:
        ids = list(dict.fromkeys(entry_ids))
        count = await self.entry_repo.delete_many(ids)
        logger.info(f"Bulk deleted {count} KPI entries")
        if self.activity:
            await self.activity.record(
                actor, "BULK_DELETE_KPIS", "kpis", "", f"Deleted {count} KPI entries."
            )
        return count

    async def _audit(self, actor: Optional[User], before: Optional[KpiEntry], after: KpiEntry) -> None:
        if actor is None:
            return
        if actor.role == Role.AGENT and not self.audit_agent_changes:
            return
        changes = build_changes(before, after)
        if not changes:
            return
        await self.audit_repo.add(
            AuditLogCreate(
                user_id=actor.id,
                user_full_name=actor.full_name,
                action=AuditAction.UPDATE if before else AuditAction.CREATE,
                agent_name=after.agent_name,
                team_name=after.team,
                kpi_date=after.date,
                changes=changes,
            )
        )


def _prepare_create(data: KpiEntryCreate) -> KpiEntryCreate:
    changes: dict[str, Any] = {}
    if not data.day:
        changes["day"] = weekday_name(data.date)
    if is_call_center(data.task):
        changes.update({field: None for field in _CALL_CENTER_CLEARED})
    return data.model_copy(update=changes) if changes else data


def _prepare_update(before: KpiEntry, update: KpiEntryUpdate) -> KpiEntryUpdate:
    changes: dict[str, Any] = {}
    provided = update.model_fields_set
    if "date" in provided and update.date is not None and "day" not in provided:
        changes["day"] = weekday_name(update.date)
    if update.custom_fields is not None:
        changes["custom_fields"] = {**before.custom_fields, **update.custom_fields}
    task = update.task if update.task is not None else before.task
    if is_call_center(task):
        for field in _CALL_CENTER_CLEARED:
            if getattr(before, field) is not None or getattr(update, field) is not None:
                changes[field] = None
    if not changes:
        return update
    # Rebuild so the derived fields count as explicitly set.
    data = update.model_dump(exclude_unset=True)
    data.update(changes)
    return KpiEntryUpdate(**data)
