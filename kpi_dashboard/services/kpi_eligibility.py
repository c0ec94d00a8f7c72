"""
Task-eligibility classifier.

Each task belongs to exactly one scoring group, and each group enables a
fixed set of calculation sources. The classification is not configurable.
"""

from types import MappingProxyType
from typing import Mapping

from kpi_dashboard.models.enums import CalculationSource, TaskGroup, TaskName

_TASK_GROUPS: Mapping[TaskName, TaskGroup] = MappingProxyType(
    {
        TaskName.CQ: TaskGroup.CALL_CENTER,
        TaskName.DQ: TaskGroup.CALL_CENTER,
        TaskName.CDQ: TaskGroup.CALL_CENTER,
        TaskName.DISPATCH: TaskGroup.DISPATCH,
        TaskName.TICKETS: TaskGroup.DISPATCH,
        TaskName.VOP: TaskGroup.DISPATCH,
        TaskName.APPROVE: TaskGroup.AMS,
        TaskName.MISSING: TaskGroup.AMS,
        TaskName.SOCIAL_MEDIA: TaskGroup.SOCIAL_MEDIA,
    }
)

_COMMON = frozenset(
    {CalculationSource.ATTENDANCE, CalculationSource.LOGIN, CalculationSource.MISTAKES}
)

GROUP_SOURCES: Mapping[TaskGroup, frozenset[CalculationSource]] = MappingProxyType(
    {
        TaskGroup.CALL_CENTER: _COMMON
        | {CalculationSource.ON_QUEUE, CalculationSource.AVG_TALK, CalculationSource.ASA},
        TaskGroup.DISPATCH: _COMMON
        | {CalculationSource.TARGET, CalculationSource.DS_PRODUCTIVITY},
        TaskGroup.AMS: _COMMON | {CalculationSource.AMS_PRODUCTIVITY},
        TaskGroup.SOCIAL_MEDIA: _COMMON
        | {CalculationSource.AMS_PRODUCTIVITY, CalculationSource.ASA},
        TaskGroup.OTHER: _COMMON
        | {CalculationSource.PRODUCTIVITY, CalculationSource.TARGET},
    }
)

# Sources that are never weighted or gated by task group.
DIRECT_SOURCES = frozenset({CalculationSource.BONUS, CalculationSource.QA, CalculationSource.PK})


def task_group(task: TaskName) -> TaskGroup:
    """Scoring group for a task; unknown tasks fall into OTHER."""
    return _TASK_GROUPS.get(task, TaskGroup.OTHER)


def eligible_sources(task: TaskName) -> frozenset[CalculationSource]:
    return GROUP_SOURCES[task_group(task)]


def is_eligible(task: TaskName, source: CalculationSource) -> bool:
    return source in eligible_sources(task)


def is_call_center(task: TaskName) -> bool:
    return task_group(task) is TaskGroup.CALL_CENTER
