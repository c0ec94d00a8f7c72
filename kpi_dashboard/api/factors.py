"""
KPI factor configuration endpoints.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from kpi_dashboard.api.deps import CurrentUser, FactorService
from kpi_dashboard.api.permissions import require_action, to_http_exception
from kpi_dashboard.core.exceptions import KpiDashboardError
from kpi_dashboard.models.kpi_factor import KpiFactor, KpiFactorConfig, KpiFactorCreate, KpiFactorUpdate
from kpi_dashboard.services.permissions import Action

router = APIRouter(prefix="/kpi-factors", tags=["kpi-factors"])


class ReplaceFactorsRequest(BaseModel):
    factors: list[KpiFactor]


class DeleteFactorsRequest(BaseModel):
    keys: list[str] = Field(..., min_length=1)


class DeleteFactorsResponse(BaseModel):
    deleted: list[str]


@router.get("", response_model=KpiFactorConfig)
async def get_factors(user: CurrentUser, service: FactorService) -> KpiFactorConfig:
    """Current factor list; the defaults are stored on first read."""
    require_action(user, Action.FACTOR_READ)
    return await service.get_config()


@router.put("", response_model=KpiFactorConfig)
async def replace_factors(
    payload: ReplaceFactorsRequest,
    user: CurrentUser,
    service: FactorService,
) -> KpiFactorConfig:
    """Replace the whole factor list (last write wins)."""
    require_action(user, Action.FACTOR_MANAGE)
    try:
        return await service.replace_factors(payload.factors, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=KpiFactor, status_code=status.HTTP_201_CREATED)
async def add_custom_factor(
    factor: KpiFactorCreate,
    user: CurrentUser,
    service: FactorService,
) -> KpiFactor:
    require_action(user, Action.FACTOR_MANAGE)
    try:
        return await service.add_custom_factor(factor, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{key}", response_model=KpiFactor)
async def update_factor(
    key: str,
    update: KpiFactorUpdate,
    user: CurrentUser,
    service: FactorService,
) -> KpiFactor:
    require_action(user, Action.FACTOR_MANAGE)
    try:
        return await service.update_factor(key, update, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.delete("", response_model=DeleteFactorsResponse)
async def delete_factors(
    payload: DeleteFactorsRequest,
    user: CurrentUser,
    service: FactorService,
) -> DeleteFactorsResponse:
    require_action(user, Action.FACTOR_MANAGE)
    try:
        deleted = await service.delete_factors(payload.keys, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
    return DeleteFactorsResponse(deleted=deleted)
