"""
KPI factor configuration repository interface.

The factor list is stored as one versioned collection. Saves replace the
whole list; concurrent saves are last-write-wins.
"""

from abc import ABC, abstractmethod
from typing import Optional

from kpi_dashboard.models.kpi_factor import KpiFactor, KpiFactorConfig


class IKpiFactorRepository(ABC):
    """Interface for factor configuration storage."""

    @abstractmethod
    async def get_config(self) -> Optional[KpiFactorConfig]:
        """Get the stored configuration, or None if nothing was saved yet."""
        pass

    @abstractmethod
    async def save(self, factors: list[KpiFactor]) -> KpiFactorConfig:
        """Replace the factor list and increment the version."""
        pass
