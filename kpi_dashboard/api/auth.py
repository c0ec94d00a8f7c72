"""
Authentication endpoints (login/me).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from kpi_dashboard.api.deps import AppSettings, CurrentUser, Users
from kpi_dashboard.api.permissions import to_http_exception
from kpi_dashboard.core.exceptions import AuthenticationError
from kpi_dashboard.core.security import create_access_token
from kpi_dashboard.models.user import AuthToken, LoginRequest, User

router = APIRouter()


@router.post("/login", response_model=AuthToken)
async def login(payload: LoginRequest, users: Users, settings: AppSettings) -> AuthToken:
    """
    Exchange email and password for a bearer token.

    The local provider issues a signed JWT; the mock provider accepts the
    user ID itself as the token.
    """
    if settings.AUTH_PROVIDER == "local" and not settings.LOCAL_JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="LOCAL_JWT_SECRET is not configured",
        )
    try:
        user = await users.authenticate(payload.email.strip(), payload.password)
    except AuthenticationError as exc:
        raise to_http_exception(exc) from exc

    if settings.AUTH_PROVIDER == "local":
        token = create_access_token(str(user.id), settings)
    else:
        token = str(user.id)
    return AuthToken(access_token=token, user=user)


@router.get("/me", response_model=User)
async def me(user: CurrentUser) -> User:
    return user
