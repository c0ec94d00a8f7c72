"""
Model builders shared by the test modules.
"""

from datetime import date, datetime, timezone
from uuid import uuid4

from kpi_dashboard.models.enums import Role, TaskName
from kpi_dashboard.models.kpi_entry import KpiEntry, KpiEntryCreate
from kpi_dashboard.models.user import User


def make_user(role: Role = Role.AGENT, team_id=None, full_name: str = "Test User") -> User:
    now = datetime.now(timezone.utc)
    return User(
        id=uuid4(),
        full_name=full_name,
        email=f"{uuid4().hex[:8]}@example.com",
        role=role,
        team_id=team_id,
        created_at=now,
        updated_at=now,
    )


def cq_fields(**overrides) -> dict:
    """Raw fields of a CQ entry on an 8-hour shift."""
    data = {
        "user_id": uuid4(),
        "agent_name": "Ava Agent",
        "team": "Alpha",
        "date": date(2024, 3, 4),
        "task": TaskName.CQ,
        "duty_hours": 8,
        "attendance": 5,
        "login": "08:00:00",
        "on_queue": "07:30:00",
        "avg_talk": "00:01:00",
        "asa": 3,
        "mistakes": 0,
        "bonus": 2,
        "qa_percent": 30,
        "pk_percent": 8,
    }
    data.update(overrides)
    return data


def make_entry(**overrides) -> KpiEntry:
    now = datetime.now(timezone.utc)
    data = {"id": uuid4(), "day": "Monday", "created_at": now, "updated_at": now}
    data.update(cq_fields(**overrides))
    return KpiEntry(**data)


def make_entry_create(**overrides) -> KpiEntryCreate:
    return KpiEntryCreate(**cq_fields(**overrides))
