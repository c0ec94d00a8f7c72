"""
User management endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from kpi_dashboard.api.deps import CurrentUser, Users
from kpi_dashboard.api.permissions import require_action, to_http_exception
from kpi_dashboard.core.exceptions import KpiDashboardError
from kpi_dashboard.models.enums import Role
from kpi_dashboard.models.user import User, UserCreate, UserUpdate
from kpi_dashboard.services.permissions import ADMIN_ROLES, Action

router = APIRouter(prefix="/users", tags=["users"])


class BulkCreateUsersRequest(BaseModel):
    users: list[UserCreate] = Field(..., min_length=1)


class BulkDeleteUsersRequest(BaseModel):
    ids: list[UUID] = Field(..., min_length=1)


class UserImportRequest(BaseModel):
    csv: str = Field(..., description="full_name,email,password,role,team_name with a header row")


@router.get("", response_model=list[User])
async def list_users(
    user: CurrentUser,
    users: Users,
    team_id: UUID | None = Query(None),
    role: Role | None = Query(None),
) -> list[User]:
    """List users. Team leads and assistants only see their own team."""
    if user.role not in ADMIN_ROLES:
        if user.role == Role.AGENT or user.team_id is None:
            return [user]
        team_id = user.team_id
    return await users.list(team_id=team_id, role=role)


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, user: CurrentUser, users: Users) -> User:
    require_action(user, Action.USER_MANAGE)
    try:
        return await users.create(payload, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.post("/bulk", response_model=list[User], status_code=status.HTTP_201_CREATED)
async def bulk_create_users(
    payload: BulkCreateUsersRequest,
    user: CurrentUser,
    users: Users,
) -> list[User]:
    require_action(user, Action.USER_MANAGE)
    try:
        return await users.bulk_create(payload.users, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.post("/import", response_model=list[User], status_code=status.HTTP_201_CREATED)
async def import_users(
    payload: UserImportRequest,
    user: CurrentUser,
    users: Users,
) -> list[User]:
    """Create users from CSV text."""
    require_action(user, Action.USER_MANAGE)
    try:
        return await users.import_csv(payload.csv, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.post("/bulk-delete", response_model=list[User])
async def bulk_delete_users(
    payload: BulkDeleteUsersRequest,
    user: CurrentUser,
    users: Users,
) -> list[User]:
    require_action(user, Action.USER_MANAGE)
    if user.id in payload.ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    return await users.bulk_delete(payload.ids, actor=user)


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: UUID, user: CurrentUser, users: Users) -> User:
    if user.id != user_id:
        require_action(user, Action.USER_MANAGE)
    try:
        return await users.get(user_id)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{user_id}", response_model=User)
async def update_user(
    user_id: UUID,
    update: UserUpdate,
    user: CurrentUser,
    users: Users,
) -> User:
    """
    Update a user.

    Anyone may change their own name, email and password; role and team
    changes and edits to other accounts need user management rights.
    """
    editing_self = user.id == user_id
    if not editing_self or update.role is not None or "team_id" in update.model_fields_set:
        require_action(user, Action.USER_MANAGE)
    try:
        return await users.update(user_id, update, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: UUID, user: CurrentUser, users: Users) -> None:
    require_action(user, Action.USER_MANAGE)
    if user.id == user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    try:
        await users.delete(user_id, actor=user)
    except KpiDashboardError as exc:
        raise to_http_exception(exc) from exc
