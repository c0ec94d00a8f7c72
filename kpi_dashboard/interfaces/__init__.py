"""Abstract interfaces for infrastructure abstraction."""

from kpi_dashboard.interfaces.auth_provider import IAuthProvider
from kpi_dashboard.interfaces.kpi_entry_repository import IKpiEntryRepository
from kpi_dashboard.interfaces.kpi_factor_repository import IKpiFactorRepository
from kpi_dashboard.interfaces.log_repository import IActivityLogRepository, IAuditLogRepository
from kpi_dashboard.interfaces.team_repository import ITeamRepository
from kpi_dashboard.interfaces.user_repository import IUserRepository

__all__ = [
    "IAuthProvider",
    "IKpiEntryRepository",
    "IKpiFactorRepository",
    "IActivityLogRepository",
    "IAuditLogRepository",
    "ITeamRepository",
    "IUserRepository",
]
