"""
Shared fixtures: an in-memory SQLite database and repositories bound to it.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kpi_dashboard.infrastructure.local.database import init_db
from kpi_dashboard.infrastructure.local.kpi_entry_repository import SqliteKpiEntryRepository
from kpi_dashboard.infrastructure.local.kpi_factor_repository import SqliteKpiFactorRepository
from kpi_dashboard.infrastructure.local.log_repository import (
    SqliteActivityLogRepository,
    SqliteAuditLogRepository,
)
from kpi_dashboard.infrastructure.local.team_repository import SqliteTeamRepository
from kpi_dashboard.infrastructure.local.user_repository import SqliteUserRepository


@pytest.fixture
async def session_factory():
    """Session factory over a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def entry_repo(session_factory):
    return SqliteKpiEntryRepository(session_factory)


@pytest.fixture
def factor_repo(session_factory):
    return SqliteKpiFactorRepository(session_factory)


@pytest.fixture
def user_repo(session_factory):
    return SqliteUserRepository(session_factory)


@pytest.fixture
def team_repo(session_factory):
    return SqliteTeamRepository(session_factory)


@pytest.fixture
def activity_repo(session_factory):
    return SqliteActivityLogRepository(session_factory)


@pytest.fixture
def audit_repo(session_factory):
    return SqliteAuditLogRepository(session_factory)

