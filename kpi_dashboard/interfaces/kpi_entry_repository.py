"""
KPI entry repository interface.

Defines the contract for KPI entry data operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from kpi_dashboard.models.enums import TaskName
from kpi_dashboard.models.kpi_entry import KpiEntry, KpiEntryCreate, KpiEntryUpdate


class IKpiEntryRepository(ABC):
    """Interface for KPI entry repository operations."""

    @abstractmethod
    async def create(self, entry: KpiEntryCreate) -> KpiEntry:
        """Create a new entry."""
        pass

    @abstractmethod
    async def get(self, entry_id: UUID) -> Optional[KpiEntry]:
        """Get an entry by ID."""
        pass

    @abstractmethod
    async def list(
        self,
        user_id: Optional[UUID] = None,
        team: Optional[str] = None,
        task: Optional[TaskName] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[KpiEntry]:
        """List entries matching exact filters, newest date first."""
        pass

    @abstractmethod
    async def update(self, entry_id: UUID, update: KpiEntryUpdate) -> KpiEntry:
        """Apply the provided fields of an update. Raises NotFoundError."""
        pass

    @abstractmethod
    async def delete(self, entry_id: UUID) -> bool:
        """Hard-delete an entry. Returns True if deleted, False if not found."""
        pass

    @abstractmethod
    async def delete_many(self, entry_ids: list[UUID]) -> int:
        """Hard-delete several entries. Returns the number deleted."""
        pass
