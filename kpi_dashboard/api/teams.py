"""
Team endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, status

from kpi_dashboard.api.deps import CurrentUser, Teams
from kpi_dashboard.api.permissions import require_action, to_http_exception
from kpi_dashboard.core.exceptions import KpiDashboardError
from kpi_dashboard.models.team import Team, TeamCreate, TeamUpdate
from kpi_dashboard.models.user import User
from kpi_dashboard.services.permissions import Action

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("", response_model=list[Team])
async def list_teams(user: CurrentUser, teams: Teams) -> list[Team]:
    return await teams.list()


@router.post("", response_model=Team, status_code=status.HTTP_201_CREATED)
async def create_team(payload: TeamCreate, user: CurrentUser, teams: Teams) -> Team:
    require_action(user, Action.TEAM_MANAGE)
    try:
        return await teams.create(payload, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{team_id}", response_model=Team)
async def get_team(team_id: UUID, user: CurrentUser, teams: Teams) -> Team:
    try:
        return await teams.get(team_id)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{team_id}/members", response_model=list[User])
async def list_team_members(team_id: UUID, user: CurrentUser, teams: Teams) -> list[User]:
    try:
        return await teams.members(team_id)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{team_id}", response_model=Team)
async def update_team(
    team_id: UUID,
    update: TeamUpdate,
    user: CurrentUser,
    teams: Teams,
) -> Team:
    """Rename a team or change its leader and assistant."""
    require_action(user, Action.TEAM_MANAGE)
    try:
        return await teams.update(team_id, update, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
