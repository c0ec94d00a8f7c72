"""
Enum definitions for the application.

These enums are used across models and provide type-safe role/task values.
"""

from enum import Enum


class Role(str, Enum):
    """User role."""

    OWNER = "Owner"
    SUPERVISOR = "Supervisor"
    TEAM_LEADER = "Team Leader"
    ASSISTANT = "Assistant"
    AGENT = "Agent"


class TaskName(str, Enum):
    """Task category an agent reports metrics for."""

    CQ = "CQ"
    DQ = "DQ"
    CDQ = "CDCDQ"
    DISPATCH = "Dispatch"
    TICKETS = "Tickets"
    VOP = "VOP"
    APPROVE = "Approve"
    MISSING = "Missing"
    SOCIAL_MEDIA = "Social Media"
    THREE_PL = "3PL"


class TaskGroup(str, Enum):
    """
    Scoring group a task belongs to.

    Each group enables a fixed subset of calculation sources.
    """

    CALL_CENTER = "CALL_CENTER"
    DISPATCH = "DISPATCH"
    AMS = "AMS"
    SOCIAL_MEDIA = "SOCIAL_MEDIA"
    OTHER = "OTHER"


class CalculationSource(str, Enum):
    """
    Immutable system identifier binding a factor to a built-in calculator.

    Values double as the default factor keys in stored configs.
    """

    ATTENDANCE = "Attendance %"
    LOGIN = "login %"
    ON_QUEUE = "On Queue %"
    TARGET = "Target %"
    AVG_TALK = "Avg Talk %"
    ASA = "ASA %"
    PRODUCTIVITY = "Productivity %"
    DS_PRODUCTIVITY = "DS Productivity %"
    AMS_PRODUCTIVITY = "AMS Productivity %"
    MISTAKES = "Mistakes %"
    BONUS = "Bonus %"
    QA = "QA %"
    PK = "PK %"


class AuditAction(str, Enum):
    """Audit record action."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
