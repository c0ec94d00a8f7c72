"""
KPI entry model definitions.

An entry is one agent's raw metrics for one task on one day. The stored/read
model is lenient so dirty legacy rows still load; the create and update
schemas enforce the input constraints.
"""

from datetime import date as date_type
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from kpi_dashboard.models.enums import TaskName

DURATION_PATTERN = r"^\d{2}:[0-5]\d:[0-5]\d$"
DUTY_HOURS_MIN = 4
DUTY_HOURS_MAX = 9
ATTENDANCE_MAX = 5
OVERALL_COLUMN = "Overall %"


class KpiEntryBase(BaseModel):
    """Base KPI entry fields."""

    user_id: UUID = Field(..., description="Agent user ID")
    agent_name: str = Field(..., min_length=1, max_length=255, description="Agent display name")
    team: str = Field(..., max_length=255, description="Team name at entry time")
    date: date_type = Field(..., description="Calendar date of the entry")
    day: Optional[str] = Field(None, max_length=20, description="Weekday name")
    task: TaskName = Field(..., description="Task the metrics belong to")
    duty_hours: int = Field(..., description="Duty-hours bucket")
    attendance: int = Field(..., description="Attendance level (0-5)")
    login: str = Field(..., description="Login duration (HH:mm:ss)")
    on_queue: Optional[str] = Field(None, description="On-queue duration (HH:mm:ss)")
    avg_talk: Optional[str] = Field(None, description="Average talk duration (HH:mm:ss)")
    asa: Optional[float] = Field(None, description="Average speed of answer (seconds)")
    productivity: Optional[float] = None
    ds_productivity: Optional[float] = None
    ams_productivity: Optional[float] = None
    target: Optional[float] = Field(None, description="Achieved target count")
    mistakes: Optional[float] = None
    bonus: Optional[float] = None
    qa_percent: Optional[float] = None
    pk_percent: Optional[float] = None
    remarks: str = Field(default="", max_length=2000)
    custom_fields: dict[str, float] = Field(
        default_factory=dict,
        description="Values for custom factors, keyed by factor key",
    )


class KpiEntryCreate(KpiEntryBase):
    """Schema for creating a KPI entry."""

    duty_hours: int = Field(..., ge=DUTY_HOURS_MIN, le=DUTY_HOURS_MAX)
    attendance: int = Field(..., ge=0, le=ATTENDANCE_MAX)
    login: str = Field(..., pattern=DURATION_PATTERN)
    on_queue: Optional[str] = Field(None, pattern=DURATION_PATTERN)
    avg_talk: Optional[str] = Field(None, pattern=DURATION_PATTERN)


class KpiEntryUpdate(BaseModel):
    """Schema for updating a KPI entry. Only provided fields are changed."""

    agent_name: Optional[str] = Field(None, min_length=1, max_length=255)
    team: Optional[str] = Field(None, max_length=255)
    date: Optional[date_type] = None
    day: Optional[str] = Field(None, max_length=20)
    task: Optional[TaskName] = None
    duty_hours: Optional[int] = Field(None, ge=DUTY_HOURS_MIN, le=DUTY_HOURS_MAX)
    attendance: Optional[int] = Field(None, ge=0, le=ATTENDANCE_MAX)
    login: Optional[str] = Field(None, pattern=DURATION_PATTERN)
    on_queue: Optional[str] = Field(None, pattern=DURATION_PATTERN)
    avg_talk: Optional[str] = Field(None, pattern=DURATION_PATTERN)
    asa: Optional[float] = None
    productivity: Optional[float] = None
    ds_productivity: Optional[float] = None
    ams_productivity: Optional[float] = None
    target: Optional[float] = None
    mistakes: Optional[float] = None
    bonus: Optional[float] = None
    qa_percent: Optional[float] = None
    pk_percent: Optional[float] = None
    remarks: Optional[str] = Field(None, max_length=2000)
    custom_fields: Optional[dict[str, float]] = None


class KpiEntry(KpiEntryBase):
    """Complete KPI entry model."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CalculatedKpi(KpiEntry):
    """
    KPI entry with derived factor percentages.

    Never persisted: it is recomputed from the current factor list on read.
    """

    percentages: dict[str, float] = Field(
        default_factory=dict,
        description="Contribution per factor key, in factor-list order",
    )
    overall_percent: float = Field(0.0, description="Overall %")

    def as_row(self) -> dict[str, Any]:
        """Flatten into entry columns followed by factor keys and Overall %."""
        row = self.model_dump(
            mode="json",
            exclude={"percentages", "overall_percent", "custom_fields"},
        )
        row.update(self.percentages)
        row[OVERALL_COLUMN] = self.overall_percent
        return row


# Column names of an exported row that factor keys must not shadow
RESERVED_ROW_KEYS = frozenset(
    (set(KpiEntry.model_fields) - {"custom_fields"}) | {OVERALL_COLUMN}
)
