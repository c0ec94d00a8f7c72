"""
Team models.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TeamBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Team name")
    leader_id: Optional[UUID] = Field(None, description="Team Leader user ID")
    assistant_id: Optional[UUID] = Field(None, description="Assistant user ID")


class TeamCreate(TeamBase):
    pass


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    leader_id: Optional[UUID] = None
    assistant_id: Optional[UUID] = None


class Team(TeamBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
