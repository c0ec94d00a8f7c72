"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class KpiDashboardError(Exception):
    """Base exception for the KPI dashboard."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(KpiDashboardError):
    """Resource not found."""

    pass


class DuplicateError(KpiDashboardError):
    """Duplicate resource detected."""

    pass


class ValidationError(KpiDashboardError):
    """Validation error."""

    pass


class AuthenticationError(KpiDashboardError):
    """Authentication failed."""

    pass


class AuthorizationError(KpiDashboardError):
    """Authorization failed."""

    pass


class ForbiddenError(AuthorizationError):
    """Forbidden operation (authorization denied)."""

    pass


class InfrastructureError(KpiDashboardError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass


class BusinessLogicError(KpiDashboardError):
    """Business logic constraint violation."""

    pass
