"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations and services based on configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from kpi_dashboard.core.config import Settings, get_settings
from kpi_dashboard.core.exceptions import AuthenticationError
from kpi_dashboard.interfaces.auth_provider import IAuthProvider
from kpi_dashboard.interfaces.kpi_entry_repository import IKpiEntryRepository
from kpi_dashboard.interfaces.kpi_factor_repository import IKpiFactorRepository
from kpi_dashboard.interfaces.log_repository import IActivityLogRepository, IAuditLogRepository
from kpi_dashboard.interfaces.team_repository import ITeamRepository
from kpi_dashboard.interfaces.user_repository import IUserRepository
from kpi_dashboard.models.user import User
from kpi_dashboard.services.activity_log_service import ActivityLogger
from kpi_dashboard.services.kpi_entry_service import KpiEntryService
from kpi_dashboard.services.kpi_factor_service import KpiFactorService
from kpi_dashboard.services.report_service import ReportService
from kpi_dashboard.services.user_service import TeamService, UserService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_kpi_entry_repository() -> IKpiEntryRepository:
    """Get KPI entry repository instance."""
    from kpi_dashboard.infrastructure.local.kpi_entry_repository import SqliteKpiEntryRepository

    return SqliteKpiEntryRepository()


@lru_cache()
def get_kpi_factor_repository() -> IKpiFactorRepository:
    """Get factor configuration repository instance."""
    from kpi_dashboard.infrastructure.local.kpi_factor_repository import SqliteKpiFactorRepository

    return SqliteKpiFactorRepository()


@lru_cache()
def get_user_repository() -> IUserRepository:
    """Get user repository instance."""
    from kpi_dashboard.infrastructure.local.user_repository import SqliteUserRepository

    return SqliteUserRepository()


@lru_cache()
def get_team_repository() -> ITeamRepository:
    """Get team repository instance."""
    from kpi_dashboard.infrastructure.local.team_repository import SqliteTeamRepository

    return SqliteTeamRepository()


@lru_cache()
def get_activity_log_repository() -> IActivityLogRepository:
    from kpi_dashboard.infrastructure.local.log_repository import SqliteActivityLogRepository

    return SqliteActivityLogRepository()


@lru_cache()
def get_audit_log_repository() -> IAuditLogRepository:
    from kpi_dashboard.infrastructure.local.log_repository import SqliteAuditLogRepository

    return SqliteAuditLogRepository()


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    if settings.AUTH_PROVIDER == "local":
        from kpi_dashboard.infrastructure.auth.local_auth import LocalAuthProvider

        return LocalAuthProvider(settings, get_user_repository())

    from kpi_dashboard.infrastructure.local.mock_auth import MockAuthProvider

    return MockAuthProvider(get_user_repository())


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

KpiEntryRepo = Annotated[IKpiEntryRepository, Depends(get_kpi_entry_repository)]
KpiFactorRepo = Annotated[IKpiFactorRepository, Depends(get_kpi_factor_repository)]
UserRepo = Annotated[IUserRepository, Depends(get_user_repository)]
TeamRepo = Annotated[ITeamRepository, Depends(get_team_repository)]
ActivityLogRepo = Annotated[IActivityLogRepository, Depends(get_activity_log_repository)]
AuditLogRepo = Annotated[IAuditLogRepository, Depends(get_audit_log_repository)]
AppSettings = Annotated[Settings, Depends(get_settings)]


# ===========================================
# Service Dependencies
# ===========================================


def get_activity_logger(activity_repo: ActivityLogRepo) -> ActivityLogger:
    return ActivityLogger(activity_repo)


Activity = Annotated[ActivityLogger, Depends(get_activity_logger)]


def get_kpi_factor_service(factor_repo: KpiFactorRepo, activity: Activity) -> KpiFactorService:
    return KpiFactorService(factor_repo, activity)


def get_kpi_entry_service(
    entry_repo: KpiEntryRepo,
    team_repo: TeamRepo,
    audit_repo: AuditLogRepo,
    activity: Activity,
    settings: AppSettings,
) -> KpiEntryService:
    return KpiEntryService(
        entry_repo,
        team_repo,
        audit_repo,
        activity,
        audit_agent_changes=settings.AUDIT_AGENT_CHANGES,
    )


FactorService = Annotated[KpiFactorService, Depends(get_kpi_factor_service)]
EntryService = Annotated[KpiEntryService, Depends(get_kpi_entry_service)]


def get_report_service(
    entry_service: EntryService,
    factor_service: FactorService,
    team_repo: TeamRepo,
    user_repo: UserRepo,
    settings: AppSettings,
) -> ReportService:
    return ReportService(
        entry_service,
        factor_service,
        team_repo,
        user_repo,
        skip_weekends=settings.MISSING_ENTRY_SKIP_WEEKENDS,
    )


def get_user_service(user_repo: UserRepo, team_repo: TeamRepo, activity: Activity) -> UserService:
    return UserService(user_repo, team_repo, activity)


def get_team_service(team_repo: TeamRepo, user_repo: UserRepo, activity: Activity) -> TeamService:
    return TeamService(team_repo, user_repo, activity)


Reports = Annotated[ReportService, Depends(get_report_service)]
Users = Annotated[UserService, Depends(get_user_service)]
Teams = Annotated[TeamService, Depends(get_team_service)]


# ===========================================
# Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    With the mock provider the bearer token is a user ID or email; with the
    local provider it is a signed JWT.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e


CurrentUser = Annotated[User, Depends(get_current_user)]
