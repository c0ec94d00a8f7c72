"""
SQLite implementation of the factor configuration store.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from kpi_dashboard.infrastructure.local.database import KpiFactorConfigORM, get_session_factory
from kpi_dashboard.interfaces.kpi_factor_repository import IKpiFactorRepository
from kpi_dashboard.models.kpi_factor import KpiFactor, KpiFactorConfig
from kpi_dashboard.utils.datetime_utils import now_utc

_CONFIG_ROW_ID = 1


class SqliteKpiFactorRepository(IKpiFactorRepository):
    """Stores the ordered factor list as JSON in a single row."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: KpiFactorConfigORM) -> KpiFactorConfig:
        return KpiFactorConfig(
            version=orm.version,
            factors=[KpiFactor.model_validate(item) for item in (orm.factors or [])],
            updated_at=orm.updated_at,
        )

    async def get_config(self) -> Optional[KpiFactorConfig]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KpiFactorConfigORM).where(KpiFactorConfigORM.id == _CONFIG_ROW_ID)
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def save(self, factors: list[KpiFactor]) -> KpiFactorConfig:
        payload = [factor.model_dump(mode="json") for factor in factors]
        async with self._session_factory() as session:
            result = await session.execute(
                select(KpiFactorConfigORM).where(KpiFactorConfigORM.id == _CONFIG_ROW_ID)
            )
            orm = result.scalar_one_or_none()
            if orm is None:
                orm = KpiFactorConfigORM(id=_CONFIG_ROW_ID, version=1, factors=payload)
                session.add(orm)
            else:
                orm.version = (orm.version or 0) + 1
                orm.factors = payload
                orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
