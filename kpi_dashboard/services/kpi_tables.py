"""
Threshold and mapping tables for the KPI engine.

Login and on-queue time are scored on a 100-step ladder whose spacing
depends on the agent's duty-hours bucket. Target achievement is scored
against a per-bucket baseline for the Dispatch-group tasks.
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from kpi_dashboard.models.enums import TaskName

STEPS = 100

# Seconds per percentage point, keyed by duty-hours bucket.
LOGIN_SECONDS_PER_POINT: Mapping[int, int] = MappingProxyType(
    {4: 144, 5: 180, 6: 216, 7: 252, 8: 288, 9: 324}
)
ON_QUEUE_SECONDS_PER_POINT: Mapping[int, int] = MappingProxyType(
    {4: 126, 5: 162, 6: 180, 7: 216, 8: 234, 9: 270}
)

TARGET_BASELINES: Mapping[int, Mapping[TaskName, int]] = MappingProxyType(
    {
        4: MappingProxyType({TaskName.VOP: 100, TaskName.TICKETS: 80, TaskName.DISPATCH: 68}),
        5: MappingProxyType({TaskName.VOP: 125, TaskName.TICKETS: 100, TaskName.DISPATCH: 85}),
        6: MappingProxyType({TaskName.VOP: 150, TaskName.TICKETS: 120, TaskName.DISPATCH: 102}),
        7: MappingProxyType({TaskName.VOP: 175, TaskName.TICKETS: 140, TaskName.DISPATCH: 119}),
        8: MappingProxyType({TaskName.VOP: 200, TaskName.TICKETS: 160, TaskName.DISPATCH: 136}),
        9: MappingProxyType({TaskName.VOP: 225, TaskName.TICKETS: 180, TaskName.DISPATCH: 153}),
    }
)


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; thresholds round .5 upward.
    return int(value + 0.5)


@lru_cache(maxsize=None)
def build_step_table(seconds_per_point: int) -> tuple[tuple[int, int], ...]:
    """
    Build the ascending (threshold_seconds, percent) ladder for p = 1..100.

    Threshold for point p is round(p * seconds_per_point).
    """
    return tuple(
        (_round_half_up(point * seconds_per_point), point)
        for point in range(1, STEPS + 1)
    )


def map_seconds_to_percent(seconds: float, table: tuple[tuple[int, int], ...]) -> int:
    """
    Step lookup: percent of the greatest threshold <= seconds.

    Returns 0 below the first threshold or for an empty table.
    """
    result = 0
    for threshold, percent in table:
        if threshold > seconds:
            break
        result = percent
    return result


def login_table(duty_hours: int) -> Optional[tuple[tuple[int, int], ...]]:
    seconds_per_point = LOGIN_SECONDS_PER_POINT.get(duty_hours)
    if seconds_per_point is None:
        return None
    return build_step_table(seconds_per_point)


def on_queue_table(duty_hours: int) -> Optional[tuple[tuple[int, int], ...]]:
    seconds_per_point = ON_QUEUE_SECONDS_PER_POINT.get(duty_hours)
    if seconds_per_point is None:
        return None
    return build_step_table(seconds_per_point)


def target_baseline(duty_hours: int, task: TaskName) -> int:
    """Baseline target for the bucket and task, or 0 when none is defined."""
    return TARGET_BASELINES.get(duty_hours, {}).get(task, 0)
