"""
KPI scoring engine.

Turns one raw KPI entry plus the current factor list into per-factor
percentage contributions and a single Overall % score. Everything here is
pure: no I/O, no shared state, and no exceptions for dirty input. Anomalies
are logged and score as 0.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, assert_never

from kpi_dashboard.models.enums import CalculationSource, TaskName
from kpi_dashboard.models.kpi_entry import CalculatedKpi, KpiEntry
from kpi_dashboard.models.kpi_factor import KpiFactor
from kpi_dashboard.services.kpi_eligibility import DIRECT_SOURCES, is_eligible
from kpi_dashboard.services.kpi_tables import (
    login_table,
    map_seconds_to_percent,
    on_queue_table,
    target_baseline,
)
from kpi_dashboard.utils.duration import clamp, duration_to_seconds, number_or_zero, to_number

logger = logging.getLogger(__name__)

ATTENDANCE_PERCENT = {0: 0, 1: 20, 2: 40, 3: 60, 4: 80, 5: 100}
ASA_PENALTY = {6: 1, 7: 2, 8: 3, 9: 4, 10: 5}
ASA_FULL_SCORE_BELOW = 6
AVG_TALK_FREE_SECONDS = 90
AVG_TALK_PENALTY_PER_2S = 0.25


def _max_score(weight: float) -> float:
    return weight * 100


def round_score(value: float) -> float:
    # Half-up on the exact binary value of the float.
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Per-source calculators. ``weight`` is factor.weight / 100.
# ---------------------------------------------------------------------------


def attendance_percent(attendance: object, weight: float) -> float:
    """Discrete 0-5 attendance level scaled by weight; other values give 0."""
    level = to_number(attendance)
    if level is None or not level.is_integer():
        return 0.0
    return ATTENDANCE_PERCENT.get(int(level), 0) * weight


def login_percent(login: str | None, duty_hours: int, weight: float) -> float:
    table = login_table(duty_hours)
    if table is None:
        logger.debug(f"No login table for duty hours {duty_hours!r}")
        return 0.0
    return map_seconds_to_percent(duration_to_seconds(login), table) * weight


def on_queue_percent(on_queue: str | None, duty_hours: int, weight: float) -> float:
    table = on_queue_table(duty_hours)
    if table is None:
        logger.debug(f"No on-queue table for duty hours {duty_hours!r}")
        return 0.0
    return map_seconds_to_percent(duration_to_seconds(on_queue), table) * weight


def target_percent(target: float | None, task: TaskName, duty_hours: int, weight: float) -> float:
    """Achieved/baseline ratio scaled by weight. Not capped at the max score."""
    achieved = to_number(target)
    if achieved is None:
        return 0.0
    baseline = target_baseline(duty_hours, task)
    if not baseline:
        return 0.0
    return (achieved / baseline) * 100 * weight


def avg_talk_percent(avg_talk: str | None, weight: float) -> float:
    if not avg_talk:
        return 0.0
    seconds = duration_to_seconds(avg_talk)
    max_score = _max_score(weight)
    if seconds <= AVG_TALK_FREE_SECONDS:
        return max_score
    penalty = ((seconds - AVG_TALK_FREE_SECONDS) / 2) * AVG_TALK_PENALTY_PER_2S
    return clamp(max_score - penalty, 0.0, max_score)


def asa_percent(asa: float | None, weight: float) -> float:
    """Full score below 6; from 6 upward a floored lookup, capped at the 10 penalty."""
    value = number_or_zero(asa)
    max_score = _max_score(weight)
    if value < ASA_FULL_SCORE_BELOW:
        return max_score
    penalty = ASA_PENALTY[min(math.floor(value), max(ASA_PENALTY))]
    return clamp(max_score - penalty, 0.0, max_score)


def productivity_percent(productivity: float | None, weight: float) -> float:
    value = to_number(productivity)
    if value is None:
        return 0.0
    return (value / 100) * _max_score(weight)


def penalty_percent(raw: float | None, weight: float) -> float:
    """
    Max score minus the raw penalty, never below 0.

    Shared by DS-Productivity, AMS-Productivity and Mistakes. An unset value
    keeps the full max score.
    """
    max_score = _max_score(weight)
    value = to_number(raw)
    if value is None:
        return max_score
    return max_score - min(value, max_score)


def direct_value(entry: KpiEntry, source: CalculationSource) -> float:
    """Raw Bonus/QA/PK value, unweighted."""
    match source:
        case CalculationSource.BONUS:
            raw = entry.bonus
        case CalculationSource.QA:
            raw = entry.qa_percent
        case CalculationSource.PK:
            raw = entry.pk_percent
        case _:
            raise ValueError(f"{source.value} is not a direct-value source")
    return number_or_zero(raw)


def calculate_source(entry: KpiEntry, source: CalculationSource, weight: float) -> float:
    """
    Contribution of one weighted source for an entry, ignoring eligibility.

    Direct sources return their raw value.
    """
    match source:
        case CalculationSource.ATTENDANCE:
            return attendance_percent(entry.attendance, weight)
        case CalculationSource.LOGIN:
            return login_percent(entry.login, entry.duty_hours, weight)
        case CalculationSource.ON_QUEUE:
            return on_queue_percent(entry.on_queue, entry.duty_hours, weight)
        case CalculationSource.TARGET:
            return target_percent(entry.target, entry.task, entry.duty_hours, weight)
        case CalculationSource.AVG_TALK:
            return avg_talk_percent(entry.avg_talk, weight)
        case CalculationSource.ASA:
            return asa_percent(entry.asa, weight)
        case CalculationSource.PRODUCTIVITY:
            return productivity_percent(entry.productivity, weight)
        case CalculationSource.DS_PRODUCTIVITY:
            return penalty_percent(entry.ds_productivity, weight)
        case CalculationSource.AMS_PRODUCTIVITY:
            return penalty_percent(entry.ams_productivity, weight)
        case CalculationSource.MISTAKES:
            return penalty_percent(entry.mistakes, weight)
        case CalculationSource.BONUS | CalculationSource.QA | CalculationSource.PK:
            return direct_value(entry, source)
        case _:
            assert_never(source)


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


def compute_calculated_kpi(entry: KpiEntry, factors: Iterable[KpiFactor]) -> CalculatedKpi:
    """
    Score an entry against a factor list.

    Every factor key appears in ``percentages`` in list order:
    - custom factors read ``entry.custom_fields[key]`` (0 when absent)
    - Bonus/QA/PK copy the raw entry value
    - weighted sources run their calculator when the task is eligible, else 0

    Overall % is the plain sum, rounded to 2 decimals and shown as 0 when
    not positive.
    """
    percentages: dict[str, float] = {}
    weighted_sum = 0.0
    direct_sum = 0.0

    for factor in factors:
        if factor.is_custom:
            contribution = number_or_zero(entry.custom_fields.get(factor.key))
            direct_sum += contribution
        elif factor.calculation_source is None:
            logger.warning(f"Factor {factor.key!r} has no calculation source; scoring 0")
            contribution = 0.0
        elif factor.calculation_source in DIRECT_SOURCES:
            contribution = direct_value(entry, factor.calculation_source)
            direct_sum += contribution
        elif is_eligible(entry.task, factor.calculation_source):
            contribution = calculate_source(entry, factor.calculation_source, factor.weight / 100)
            weighted_sum += contribution
        else:
            contribution = 0.0
        percentages[factor.key] = contribution

    overall = weighted_sum + direct_sum
    overall_percent = round_score(overall) if overall > 0 else 0.0

    return CalculatedKpi(
        **entry.model_dump(exclude={"percentages", "overall_percent"}),
        percentages=percentages,
        overall_percent=overall_percent,
    )


def compute_many(entries: Iterable[KpiEntry], factors: list[KpiFactor]) -> list[CalculatedKpi]:
    return [compute_calculated_kpi(entry, factors) for entry in entries]
