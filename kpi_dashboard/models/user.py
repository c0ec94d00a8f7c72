"""
User account models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from kpi_dashboard.models.enums import Role


class UserBase(BaseModel):
    """Base user fields."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    role: Role = Field(Role.AGENT)
    team_id: Optional[UUID] = Field(None, description="Team the user belongs to")


class UserCreate(UserBase):
    """Create a user account."""

    password: Optional[str] = Field(None, min_length=1, max_length=255)


class UserUpdate(BaseModel):
    """Update user account fields."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    role: Optional[Role] = None
    team_id: Optional[UUID] = None
    password: Optional[str] = Field(None, min_length=1, max_length=255)
    current_password: Optional[str] = Field(
        None, description="Required when changing an existing password"
    )


class User(UserBase):
    """User account stored in the database."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
