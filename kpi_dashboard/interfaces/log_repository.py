"""
Activity and audit log repository interfaces.

Both logs are append-only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from kpi_dashboard.models.logs import ActivityLog, ActivityLogCreate, AuditLog, AuditLogCreate


class IActivityLogRepository(ABC):
    @abstractmethod
    async def add(self, log: ActivityLogCreate) -> ActivityLog:
        pass

    @abstractmethod
    async def list(self, limit: Optional[int] = None) -> list[ActivityLog]:
        """List records, newest first."""
        pass


class IAuditLogRepository(ABC):
    @abstractmethod
    async def add(self, log: AuditLogCreate) -> AuditLog:
        pass

    @abstractmethod
    async def list(self, limit: Optional[int] = None) -> list[AuditLog]:
        """List records, newest first."""
        pass
