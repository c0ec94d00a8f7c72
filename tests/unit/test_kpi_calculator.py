"""
Unit tests for the KPI scoring engine.
"""

import logging

import pytest

from kpi_dashboard.models.enums import CalculationSource, TaskName
from kpi_dashboard.models.kpi_factor import KpiFactor
from kpi_dashboard.services.kpi_calculator import (
    asa_percent,
    attendance_percent,
    avg_talk_percent,
    calculate_source,
    compute_calculated_kpi,
    compute_many,
    direct_value,
    login_percent,
    on_queue_percent,
    penalty_percent,
    productivity_percent,
    round_score,
    target_percent,
)
from kpi_dashboard.services.kpi_eligibility import DIRECT_SOURCES
from kpi_dashboard.services.kpi_factor_defaults import get_default_factors
from tests.helpers import make_entry


def _custom(key: str, weight: float = 10) -> KpiFactor:
    return KpiFactor(key=key, display_name=key.title(), weight=weight, is_custom=True)


class TestAttendance:
    @pytest.mark.parametrize("level, expected", [(0, 0), (1, 1), (3, 3), (5, 5)])
    def test_levels_scale_by_weight(self, level, expected):
        assert attendance_percent(level, 0.05) == pytest.approx(expected)

    @pytest.mark.parametrize("level", [-1, 6, 10, 2.5, None, "x"])
    def test_out_of_range_is_zero(self, level):
        assert attendance_percent(level, 0.05) == 0


class TestLoginAndOnQueue:
    @pytest.mark.parametrize("duty_hours", [4, 5, 6, 7, 8, 9])
    def test_full_duty_login_is_max(self, duty_hours):
        login = f"{duty_hours:02d}:00:00"
        assert login_percent(login, duty_hours, 0.10) == pytest.approx(10)

    def test_unknown_bucket_is_zero(self):
        assert login_percent("08:00:00", 10, 0.10) == 0
        assert on_queue_percent("08:00:00", 3, 0.15) == 0

    def test_malformed_duration_is_zero(self):
        assert login_percent("8h", 8, 0.10) == 0
        assert on_queue_percent(None, 8, 0.15) == 0

    def test_on_queue_step(self):
        # 8h on-queue: 234 s per point
        assert on_queue_percent("01:57:00", 8, 1.0) == pytest.approx(30)


class TestTarget:
    def test_ratio_against_baseline(self):
        assert target_percent(100, TaskName.VOP, 8, 0.15) == pytest.approx(7.5)

    def test_over_performance_is_not_capped(self):
        assert target_percent(400, TaskName.VOP, 8, 0.15) == pytest.approx(30)

    def test_missing_value_or_baseline_is_zero(self):
        assert target_percent(None, TaskName.VOP, 8, 0.15) == 0
        assert target_percent(100, TaskName.THREE_PL, 8, 0.15) == 0
        assert target_percent(100, TaskName.VOP, 12, 0.15) == 0


class TestAvgTalk:
    def test_full_score_up_to_90_seconds(self):
        assert avg_talk_percent("00:01:00", 0.05) == pytest.approx(5)
        assert avg_talk_percent("00:01:30", 0.05) == pytest.approx(5)

    def test_penalty_above_90_seconds(self):
        # (100 - 90) / 2 * 0.25 = 1.25
        assert avg_talk_percent("00:01:40", 0.05) == pytest.approx(3.75)

    def test_floor_at_zero(self):
        assert avg_talk_percent("01:00:00", 0.05) == 0

    def test_missing_is_zero(self):
        assert avg_talk_percent(None, 0.05) == 0
        assert avg_talk_percent("", 0.05) == 0

    def test_non_increasing_beyond_90_seconds(self):
        scores = [avg_talk_percent(f"00:{s // 60:02d}:{s % 60:02d}", 0.05) for s in range(90, 300, 7)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))


class TestAsa:
    def test_below_six_is_full(self):
        assert asa_percent(5.9, 0.05) == pytest.approx(5)

    def test_penalty_table(self):
        assert asa_percent(7, 0.05) == pytest.approx(3)
        assert asa_percent(9.8, 0.05) == pytest.approx(1)

    def test_ten_and_above_use_the_ten_penalty(self):
        assert asa_percent(10, 0.05) == 0
        assert asa_percent(42, 0.10) == pytest.approx(5)

    def test_missing_counts_as_zero(self):
        assert asa_percent(None, 0.05) == pytest.approx(5)


class TestProductivityAndPenalties:
    def test_productivity_is_linear(self):
        assert productivity_percent(80, 0.25) == pytest.approx(20)
        assert productivity_percent(None, 0.25) == 0

    def test_penalty_subtracts_raw_value(self):
        assert penalty_percent(3, 0.15) == pytest.approx(12)

    def test_penalty_never_negative(self):
        assert penalty_percent(20, 0.15) == 0

    def test_unset_penalty_keeps_max(self):
        assert penalty_percent(None, 0.15) == pytest.approx(15)


class TestDispatch:
    def test_direct_values(self):
        entry = make_entry(bonus=2, qa_percent=30, pk_percent=None)
        assert direct_value(entry, CalculationSource.BONUS) == 2
        assert direct_value(entry, CalculationSource.QA) == 30
        assert direct_value(entry, CalculationSource.PK) == 0

    def test_direct_value_rejects_weighted_source(self):
        with pytest.raises(ValueError):
            direct_value(make_entry(), CalculationSource.LOGIN)

    @pytest.mark.parametrize("source", list(CalculationSource))
    def test_every_source_is_dispatched(self, source):
        assert isinstance(calculate_source(make_entry(), source, 0.1), float)


class TestComposer:
    def test_call_center_scenario(self):
        result = compute_calculated_kpi(make_entry(), get_default_factors())

        assert result.percentages["Attendance %"] == pytest.approx(5)
        assert result.percentages["login %"] == pytest.approx(10)
        assert result.percentages["On Queue %"] == pytest.approx(15)
        assert result.percentages["Avg Talk %"] == pytest.approx(5)
        assert result.percentages["ASA %"] == pytest.approx(5)
        assert result.percentages["Mistakes %"] == pytest.approx(15)
        assert result.percentages["Target %"] == 0
        assert result.percentages["Productivity %"] == 0
        assert result.percentages["Bonus %"] == 2
        assert result.percentages["QA %"] == 30
        assert result.percentages["PK %"] == 8
        assert result.overall_percent == 95.0

    def test_every_factor_key_is_reported_in_order(self):
        factors = get_default_factors() + [_custom("upsell")]
        result = compute_calculated_kpi(make_entry(), factors)
        assert list(result.percentages) == [factor.key for factor in factors]

    def test_entry_fields_are_kept(self):
        entry = make_entry(remarks="late start")
        result = compute_calculated_kpi(entry, get_default_factors())
        assert result.id == entry.id
        assert result.remarks == "late start"
        assert result.task == TaskName.CQ

    def test_idempotent(self):
        entry = make_entry(asa=8, avg_talk="00:02:10")
        factors = get_default_factors()
        assert compute_calculated_kpi(entry, factors) == compute_calculated_kpi(entry, factors)

    def test_weighted_sum_matches_overall(self):
        entry = make_entry(asa=7.5, avg_talk="00:02:03", mistakes=4, bonus=1.5)
        factors = get_default_factors() + [_custom("upsell")]
        entry = entry.model_copy(update={"custom_fields": {"upsell": 3.25}})
        result = compute_calculated_kpi(entry, factors)

        direct_keys = {f.key for f in factors if f.is_custom or f.calculation_source in DIRECT_SOURCES}
        weighted = sum(v for k, v in result.percentages.items() if k not in direct_keys)
        direct = sum(v for k, v in result.percentages.items() if k in direct_keys)
        assert result.overall_percent - direct == pytest.approx(weighted, abs=0.01)

    def test_custom_factor_reads_custom_fields(self):
        factors = [_custom("upsell")]
        entry = make_entry(custom_fields={"upsell": 4})
        assert compute_calculated_kpi(entry, factors).percentages["upsell"] == 4

    def test_missing_custom_value_is_zero(self):
        result = compute_calculated_kpi(make_entry(), [_custom("upsell")])
        assert result.percentages["upsell"] == 0

    def test_ineligible_source_is_zero_not_omitted(self):
        factors = [KpiFactor(key="Target %", calculation_source=CalculationSource.TARGET,
                             display_name="Target", weight=15)]
        result = compute_calculated_kpi(make_entry(target=500), factors)
        assert result.percentages == {"Target %": 0.0}

    def test_dispatch_entry_uses_target(self):
        entry = make_entry(task=TaskName.VOP, target=200, on_queue=None, avg_talk=None, asa=None)
        result = compute_calculated_kpi(entry, get_default_factors())
        assert result.percentages["Target %"] == pytest.approx(15)
        assert result.percentages["On Queue %"] == 0
        assert result.percentages["DS Productivity %"] == pytest.approx(10)

    def test_renamed_factor_keeps_its_calculator(self):
        factors = [KpiFactor(key="Presence", calculation_source=CalculationSource.ATTENDANCE,
                             display_name="Presence", weight=5)]
        assert compute_calculated_kpi(make_entry(), factors).percentages["Presence"] == pytest.approx(5)

    def test_negative_overall_clamps_to_zero(self):
        factors = [_custom("penalty")]
        entry = make_entry(custom_fields={"penalty": -12})
        assert compute_calculated_kpi(entry, factors).overall_percent == 0

    def test_heavy_mistakes_do_not_go_negative(self):
        factors = [KpiFactor(key="Mistakes %", calculation_source=CalculationSource.MISTAKES,
                             display_name="Mistakes", weight=15)]
        result = compute_calculated_kpi(make_entry(mistakes=20), factors)
        assert result.percentages["Mistakes %"] == 0
        assert result.overall_percent == 0

    def test_factor_without_source_scores_zero_and_warns(self, caplog):
        factor = KpiFactor.model_construct(
            key="legacy", calculation_source=None, display_name="Legacy", weight=10,
            is_custom=False, is_editable=True, is_deletable=True, description="", formula="",
        )
        with caplog.at_level(logging.WARNING, logger="kpi_dashboard.services.kpi_calculator"):
            result = compute_calculated_kpi(make_entry(), [factor])
        assert result.percentages["legacy"] == 0
        assert "legacy" in caplog.text

    def test_dirty_entry_never_raises(self):
        entry = make_entry(login="garbage", on_queue="1:2", avg_talk="xx:yy:zz", duty_hours=11)
        result = compute_calculated_kpi(entry, get_default_factors())
        assert result.percentages["login %"] == 0
        assert result.percentages["On Queue %"] == 0

    def test_recomputing_a_calculated_kpi(self):
        factors = get_default_factors()
        first = compute_calculated_kpi(make_entry(), factors)
        assert compute_calculated_kpi(first, factors).overall_percent == first.overall_percent

    def test_compute_many(self):
        results = compute_many([make_entry(), make_entry(attendance=0)], get_default_factors())
        assert [r.overall_percent for r in results] == [95.0, 90.0]


class TestRoundScore:
    def test_two_decimals(self):
        assert round_score(94.123) == 94.12
        assert round_score(1.005) == 1.0  # binary value of 1.005 is just below
        assert round_score(0.125) == 0.13
