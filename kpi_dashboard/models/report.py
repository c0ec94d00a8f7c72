"""
Report result models.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from kpi_dashboard.models.enums import TaskName


class KpiFilter(BaseModel):
    """Report filters. Name and team match case-insensitively by substring."""

    agent_name: Optional[str] = None
    team: Optional[str] = None
    task: Optional[TaskName] = None
    date_from: Optional[date] = Field(None, description="Inclusive lower bound")
    date_to: Optional[date] = Field(None, description="Inclusive upper bound")


class TeamRank(BaseModel):
    rank: int = Field(..., ge=0, description="1-based rank; 0 when the team has no entries")
    total_teams: int = Field(..., ge=0, description="Teams with at least one entry")


class AgentTaskSummary(BaseModel):
    task: TaskName
    count: int
    average_overall: float = Field(..., description="Average Overall %, 2 decimals")


class MissingEntries(BaseModel):
    team_name: str
    missing_dates: list[str] = Field(default_factory=list, description="Day-of-month numbers")
    count: int
