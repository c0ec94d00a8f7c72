"""
Team repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from kpi_dashboard.models.team import Team, TeamCreate, TeamUpdate


class ITeamRepository(ABC):
    """Interface for team persistence."""

    @abstractmethod
    async def create(self, team: TeamCreate) -> Team:
        """Create a team. Raises DuplicateError when the name is taken."""
        pass

    @abstractmethod
    async def get(self, team_id: UUID) -> Optional[Team]:
        pass

    @abstractmethod
    async def list(self) -> list[Team]:
        pass

    @abstractmethod
    async def update(self, team_id: UUID, update: TeamUpdate) -> Team:
        pass
