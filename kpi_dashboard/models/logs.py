"""
Activity and audit log models.

Both logs are append-only. Activity records every mutating action; audit
records field-level changes to KPI entries.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from kpi_dashboard.models.enums import AuditAction


class ActivityLogCreate(BaseModel):
    user_id: Optional[UUID] = None
    user_full_name: str = ""
    action: str = Field(..., min_length=1, max_length=50, description="e.g. CREATE_KPI")
    affected_table: str = Field(..., max_length=50)
    record_id: str = Field(default="", max_length=100)
    details: str = Field(default="", max_length=2000)


class ActivityLog(ActivityLogCreate):
    id: UUID
    timestamp: datetime

    class Config:
        from_attributes = True


class FieldChange(BaseModel):
    """One changed field. Values are string forms; None is rendered as N/A."""

    field: str
    old_value: str
    new_value: str


class AuditLogCreate(BaseModel):
    user_id: Optional[UUID] = None
    user_full_name: str = ""
    action: AuditAction
    agent_name: str
    team_name: str
    kpi_date: date
    changes: list[FieldChange] = Field(default_factory=list)


class AuditLog(AuditLogCreate):
    id: UUID
    timestamp: datetime

    class Config:
        from_attributes = True
