"""Pydantic models (schemas) for the application."""

from kpi_dashboard.models.enums import (
    AuditAction,
    CalculationSource,
    Role,
    TaskGroup,
    TaskName,
)
from kpi_dashboard.models.kpi_entry import CalculatedKpi, KpiEntry, KpiEntryCreate, KpiEntryUpdate
from kpi_dashboard.models.kpi_factor import KpiFactor, KpiFactorConfig, KpiFactorCreate, KpiFactorUpdate
from kpi_dashboard.models.logs import ActivityLog, ActivityLogCreate, AuditLog, AuditLogCreate, FieldChange
from kpi_dashboard.models.report import AgentTaskSummary, KpiFilter, MissingEntries, TeamRank
from kpi_dashboard.models.team import Team, TeamCreate, TeamUpdate
from kpi_dashboard.models.user import User, UserCreate, UserUpdate

__all__ = [
    # Enums
    "Role",
    "TaskName",
    "TaskGroup",
    "CalculationSource",
    "AuditAction",
    # KPI
    "KpiEntry",
    "KpiEntryCreate",
    "KpiEntryUpdate",
    "CalculatedKpi",
    "KpiFactor",
    "KpiFactorCreate",
    "KpiFactorUpdate",
    "KpiFactorConfig",
    # Reports
    "KpiFilter",
    "TeamRank",
    "AgentTaskSummary",
    "MissingEntries",
    # Accounts
    "User",
    "UserCreate",
    "UserUpdate",
    "Team",
    "TeamCreate",
    "TeamUpdate",
    # Logs
    "ActivityLog",
    "ActivityLogCreate",
    "AuditLog",
    "AuditLogCreate",
    "FieldChange",
]
