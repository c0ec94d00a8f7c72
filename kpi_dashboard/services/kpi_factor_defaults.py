"""
Default KPI factor catalog.
"""

from kpi_dashboard.models.enums import CalculationSource
from kpi_dashboard.models.kpi_factor import KpiFactor

_DIRECT_FORMULA = "Direct value added to final score."
_PENALTY_FORMULA = "Max score minus penalty points."


def _system(source: CalculationSource, display_name: str, weight: float, description: str, formula: str) -> KpiFactor:
    return KpiFactor(
        key=source.value,
        calculation_source=source,
        display_name=display_name,
        weight=weight,
        description=description,
        formula=formula,
    )


_DEFAULT_FACTORS: list[KpiFactor] = [
    _system(
        CalculationSource.ATTENDANCE,
        "Attendance",
        5,
        "Contribution from daily attendance score (0-5).",
        "Score (0-5) maps to 0-100%, multiplied by Weight.",
    ),
    _system(
        CalculationSource.LOGIN,
        "Login",
        10,
        "Contribution from login time based on duty hours.",
        "Login time maps to 0-100% based on duty hours, multiplied by Weight.",
    ),
    _system(
        CalculationSource.ON_QUEUE,
        "On Queue",
        15,
        "For Call Center tasks. Contribution from time spent on queue.",
        "Queue time maps to 0-100% based on duty hours, multiplied by Weight.",
    ),
    _system(
        CalculationSource.TARGET,
        "Target",
        15,
        "For Dispatch tasks. Contribution from meeting targets.",
        "(Achieved / Baseline Target) * 100 * Weight.",
    ),
    _system(
        CalculationSource.AVG_TALK,
        "Avg Talk",
        5,
        "For Call Center tasks. Penalty/reward based on average talk time.",
        "Starts at max score, penalty applied for time over 90s.",
    ),
    _system(
        CalculationSource.ASA,
        "ASA",
        5,
        "For Call Center tasks. Penalty/reward based on Average Speed of Answer.",
        "Starts at max score, penalty applied for ASA over 5s.",
    ),
    _system(
        CalculationSource.DS_PRODUCTIVITY,
        "DS Productivity",
        10,
        "For Dispatch tasks. Penalty for productivity issues.",
        _PENALTY_FORMULA,
    ),
    _system(
        CalculationSource.AMS_PRODUCTIVITY,
        "AMS Productivity",
        25,
        "For AMS & Social Media tasks. Penalty for productivity issues.",
        _PENALTY_FORMULA,
    ),
    _system(
        CalculationSource.PRODUCTIVITY,
        "Productivity",
        25,
        "For other tasks. Contribution from productivity score.",
        "(Productivity / 100) * (Weight * 100).",
    ),
    _system(
        CalculationSource.MISTAKES,
        "Mistakes",
        15,
        "Penalty based on number of mistakes.",
        _PENALTY_FORMULA,
    ),
    _system(
        CalculationSource.BONUS,
        "Bonus",
        0,
        "Bonus points are added directly to the overall score. Weight is not applicable.",
        _DIRECT_FORMULA,
    ),
    _system(
        CalculationSource.QA,
        "QA %",
        35,
        "Score from Quality Assurance. This value is the maximum possible score.",
        _DIRECT_FORMULA,
    ),
    _system(
        CalculationSource.PK,
        "PK %",
        10,
        "Score from Product Knowledge test. This value is the maximum possible score.",
        _DIRECT_FORMULA,
    ),
]


def get_default_factors() -> list[KpiFactor]:
    """Return fresh copies of the default factor list."""
    return [factor.model_copy() for factor in _DEFAULT_FACTORS]
