"""
Report endpoints: team ranking, per-agent summaries and missing entries.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query

from kpi_dashboard.api.deps import CurrentUser, Reports
from kpi_dashboard.api.permissions import require_action, to_http_exception
from kpi_dashboard.core.exceptions import KpiDashboardError
from kpi_dashboard.models.report import AgentTaskSummary, MissingEntries, TeamRank
from kpi_dashboard.services.permissions import ADMIN_ROLES, Action

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/team-rank/{team_id}", response_model=TeamRank)
async def get_team_rank(
    team_id: UUID,
    user: CurrentUser,
    reports: Reports,
    years: list[int] = Query([], description="Empty means every year"),
    months: list[int] = Query([], description="1-12; empty means every month"),
) -> TeamRank:
    require_action(user, Action.REPORT_READ)
    return await reports.team_rank(team_id, years, months)


@router.get("/agents/{user_id}/summary", response_model=list[AgentTaskSummary])
async def get_agent_summary(
    user_id: UUID,
    user: CurrentUser,
    reports: Reports,
    years: list[int] = Query([]),
    months: list[int] = Query([]),
) -> list[AgentTaskSummary]:
    """Entry count and average Overall % per task for one agent."""
    require_action(user, Action.REPORT_READ)
    try:
        return await reports.agent_summary(user_id, years, months, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.get("/missing-entries", response_model=list[MissingEntries])
async def get_missing_entries(
    user: CurrentUser,
    reports: Reports,
    team_id: UUID | None = Query(None, description="Defaults to the caller's team"),
    today: date | None = Query(None, description="Defaults to the server date"),
) -> list[MissingEntries]:
    """Working days this month with fewer entries than agents."""
    require_action(user, Action.REPORT_READ)
    if user.role not in ADMIN_ROLES:
        if user.team_id is None:
            return []
        team_id = user.team_id
    try:
        return await reports.missing_entries(team_id, today or date.today())
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
