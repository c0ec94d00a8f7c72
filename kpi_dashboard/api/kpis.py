"""
KPI entry API endpoints.

Entries are scored on read with the current factor list.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel, Field

from kpi_dashboard.api.deps import CurrentUser, EntryService, FactorService, Reports
from kpi_dashboard.api.permissions import require_action, to_http_exception
from kpi_dashboard.core.exceptions import KpiDashboardError
from kpi_dashboard.models.enums import TaskName
from kpi_dashboard.models.kpi_entry import CalculatedKpi, KpiEntry, KpiEntryCreate, KpiEntryUpdate
from kpi_dashboard.models.report import KpiFilter
from kpi_dashboard.services.kpi_calculator import compute_calculated_kpi
from kpi_dashboard.services.permissions import Action

router = APIRouter(prefix="/kpis", tags=["kpis"])


class BulkDeleteRequest(BaseModel):
    ids: list[UUID] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int


def _filters(
    agent_name: str | None,
    team: str | None,
    task: TaskName | None,
    date_from: date | None,
    date_to: date | None,
) -> KpiFilter:
    return KpiFilter(
        agent_name=agent_name,
        team=team,
        task=task,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("", response_model=list[CalculatedKpi])
async def list_kpis(
    user: CurrentUser,
    reports: Reports,
    agent_name: str | None = Query(None, description="Case-insensitive substring"),
    team: str | None = Query(None, description="Case-insensitive substring"),
    task: TaskName | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    user_id: UUID | None = Query(None, description="Restrict to one agent"),
) -> list[CalculatedKpi]:
    """List scored entries visible to the current user, newest first."""
    require_action(user, Action.KPI_READ)
    filters = _filters(agent_name, team, task, date_from, date_to)
    return await reports.list_calculated(user, filters, user_id=user_id)


@router.get("/export.csv")
async def export_kpis(
    user: CurrentUser,
    reports: Reports,
    agent_name: str | None = Query(None),
    team: str | None = Query(None),
    task: TaskName | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
) -> Response:
    """Export the filtered, scored entries as CSV."""
    require_action(user, Action.REPORT_READ)
    filters = _filters(agent_name, team, task, date_from, date_to)
    try:
        content = await reports.export_csv(user, filters)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
    filename = f"kpi_report_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=KpiEntry, status_code=status.HTTP_201_CREATED)
async def create_kpi(entry: KpiEntryCreate, user: CurrentUser, service: EntryService) -> KpiEntry:
    require_action(user, Action.KPI_CREATE)
    try:
        return await service.create(entry, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_kpis(
    payload: BulkDeleteRequest,
    user: CurrentUser,
    service: EntryService,
) -> BulkDeleteResponse:
    require_action(user, Action.KPI_DELETE)
    deleted = await service.delete_many(payload.ids, actor=user)
    return BulkDeleteResponse(deleted=deleted)


@router.get("/{entry_id}", response_model=KpiEntry)
async def get_kpi(entry_id: UUID, user: CurrentUser, service: EntryService) -> KpiEntry:
    require_action(user, Action.KPI_READ)
    try:
        return await service.get(entry_id, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{entry_id}/calculated", response_model=CalculatedKpi)
async def get_calculated_kpi(
    entry_id: UUID,
    user: CurrentUser,
    service: EntryService,
    factor_service: FactorService,
) -> CalculatedKpi:
    """Score a single entry with the current factor list."""
    require_action(user, Action.KPI_READ)
    try:
        entry = await service.get(entry_id, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
    factors = await factor_service.list_factors()
    return compute_calculated_kpi(entry, factors)


@router.patch("/{entry_id}", response_model=KpiEntry)
async def update_kpi(
    entry_id: UUID,
    update: KpiEntryUpdate,
    user: CurrentUser,
    service: EntryService,
) -> KpiEntry:
    require_action(user, Action.KPI_UPDATE)
    try:
        return await service.update(entry_id, update, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_kpi(entry_id: UUID, user: CurrentUser, service: EntryService) -> None:
    require_action(user, Action.KPI_DELETE)
    try:
        await service.delete(entry_id, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
