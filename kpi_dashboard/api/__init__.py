"""API routers."""

from kpi_dashboard.api import (
    auth,
    factors,
    kpis,
    logs,
    reports,
    teams,
    users,
)

__all__ = [
    "auth",
    "kpis",
    "factors",
    "reports",
    "users",
    "teams",
    "logs",
]
