"""
Activity and audit log endpoints (read only).
"""

from fastapi import APIRouter, Query

from kpi_dashboard.api.deps import ActivityLogRepo, AuditLogRepo, CurrentUser
from kpi_dashboard.api.permissions import require_action
from kpi_dashboard.models.logs import ActivityLog, AuditLog
from kpi_dashboard.services.permissions import Action

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/activity", response_model=list[ActivityLog])
async def list_activity_logs(
    user: CurrentUser,
    repo: ActivityLogRepo,
    limit: int = Query(200, ge=1, le=1000),
) -> list[ActivityLog]:
    """Newest first."""
    require_action(user, Action.LOG_READ)
    return await repo.list(limit=limit)


@router.get("/audit", response_model=list[AuditLog])
async def list_audit_logs(
    user: CurrentUser,
    repo: AuditLogRepo,
    limit: int = Query(200, ge=1, le=1000),
) -> list[AuditLog]:
    """Field-level KPI entry changes, newest first."""
    require_action(user, Action.LOG_READ)
    return await repo.list(limit=limit)
