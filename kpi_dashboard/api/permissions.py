from __future__ import annotations

from fastapi import HTTPException, status

from kpi_dashboard.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessLogicError,
    DuplicateError,
    ForbiddenError,
    KpiDashboardError,
    NotFoundError,
    ValidationError,
)
from kpi_dashboard.models.user import User
from kpi_dashboard.services.permissions import Action, ensure_action

_STATUS_BY_ERROR: tuple[tuple[type[KpiDashboardError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (BusinessLogicError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
)


def to_http_exception(exc: KpiDashboardError) -> HTTPException:
    """Map an application error to its HTTP status."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def require_action(user: User, action: Action) -> User:
    try:
        return ensure_action(user, action)
    except ForbiddenError as e:
        raise to_http_exception(e) from e
