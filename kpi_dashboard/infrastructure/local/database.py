"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from kpi_dashboard.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class KpiEntryORM(Base):
    """KPI entry ORM model."""

    __tablename__ = "kpi_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    agent_name = Column(String(255), nullable=False)
    team = Column(String(255), nullable=False, default="", index=True)
    date = Column(Date, nullable=False, index=True)
    day = Column(String(20), nullable=True)
    task = Column(String(30), nullable=False, index=True)
    duty_hours = Column(Integer, nullable=False)
    attendance = Column(Integer, nullable=False, default=0)
    login = Column(String(20), nullable=False, default="")
    on_queue = Column(String(20), nullable=True)
    avg_talk = Column(String(20), nullable=True)
    asa = Column(Float, nullable=True)
    productivity = Column(Float, nullable=True)
    ds_productivity = Column(Float, nullable=True)
    ams_productivity = Column(Float, nullable=True)
    target = Column(Float, nullable=True)
    mistakes = Column(Float, nullable=True)
    bonus = Column(Float, nullable=True)
    qa_percent = Column(Float, nullable=True)
    pk_percent = Column(Float, nullable=True)
    remarks = Column(Text, nullable=False, default="")
    custom_fields = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class KpiFactorConfigORM(Base):
    """
    Factor configuration ORM model.

    A single row holds the whole ordered factor list; every save replaces
    the list and bumps ``version``.
    """

    __tablename__ = "kpi_factor_config"

    id = Column(Integer, primary_key=True, default=1)
    version = Column(Integer, nullable=False, default=0)
    factors = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserORM(Base):
    """User ORM model."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default="Agent", index=True)
    team_id = Column(String(36), nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TeamORM(Base):
    """Team ORM model."""

    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False, unique=True)
    leader_id = Column(String(36), nullable=True)
    assistant_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ActivityLogORM(Base):
    """Activity log ORM model (append-only)."""

    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    user_id = Column(String(36), nullable=True, index=True)
    user_full_name = Column(String(255), nullable=False, default="")
    action = Column(String(50), nullable=False, index=True)
    affected_table = Column(String(50), nullable=False)
    record_id = Column(String(100), nullable=False, default="")
    details = Column(Text, nullable=False, default="")


class AuditLogORM(Base):
    """Audit log ORM model (append-only)."""

    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    user_id = Column(String(36), nullable=True, index=True)
    user_full_name = Column(String(255), nullable=False, default="")
    action = Column(String(10), nullable=False)
    agent_name = Column(String(255), nullable=False)
    team_name = Column(String(255), nullable=False, default="")
    kpi_date = Column(Date, nullable=False)
    changes = Column(JSON, nullable=False, default=list)


# ===========================================
# Database Session Management
# ===========================================


def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine=None):
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
