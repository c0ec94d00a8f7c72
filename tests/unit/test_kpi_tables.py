"""
Unit tests for the login/on-queue step tables and target baselines.
"""

import pytest

from kpi_dashboard.models.enums import TaskName
from kpi_dashboard.services.kpi_tables import (
    LOGIN_SECONDS_PER_POINT,
    ON_QUEUE_SECONDS_PER_POINT,
    build_step_table,
    login_table,
    map_seconds_to_percent,
    on_queue_table,
    target_baseline,
)

BUCKETS = [4, 5, 6, 7, 8, 9]


class TestStepTable:
    def test_has_one_threshold_per_point(self):
        table = build_step_table(288)
        assert len(table) == 100
        assert table[0] == (288, 1)
        assert table[-1] == (28800, 100)

    def test_thresholds_are_ascending(self):
        for seconds_per_point in ON_QUEUE_SECONDS_PER_POINT.values():
            thresholds = [threshold for threshold, _ in build_step_table(seconds_per_point)]
            assert thresholds == sorted(thresholds)

    def test_below_first_threshold_is_zero(self):
        assert map_seconds_to_percent(287, build_step_table(288)) == 0

    def test_step_lookup_rounds_down(self):
        table = build_step_table(288)
        assert map_seconds_to_percent(288 * 50, table) == 50
        assert map_seconds_to_percent(288 * 50 + 287, table) == 50
        assert map_seconds_to_percent(288 * 51, table) == 51

    def test_above_last_threshold_caps_at_100(self):
        assert map_seconds_to_percent(10**6, build_step_table(288)) == 100

    def test_empty_table(self):
        assert map_seconds_to_percent(500, ()) == 0


class TestBucketTables:
    @pytest.mark.parametrize("duty_hours", BUCKETS)
    def test_full_duty_login_reaches_100(self, duty_hours):
        table = login_table(duty_hours)
        assert map_seconds_to_percent(duty_hours * 3600, table) == 100

    def test_eight_hour_on_queue_full_threshold(self):
        table = on_queue_table(8)
        assert table[-1][0] == 23400
        assert map_seconds_to_percent(27000, table) == 100

    @pytest.mark.parametrize("duty_hours", [0, 3, 10, 12])
    def test_unknown_bucket_has_no_table(self, duty_hours):
        assert login_table(duty_hours) is None
        assert on_queue_table(duty_hours) is None

    def test_every_bucket_is_defined(self):
        assert sorted(LOGIN_SECONDS_PER_POINT) == BUCKETS
        assert sorted(ON_QUEUE_SECONDS_PER_POINT) == BUCKETS


class TestTargetBaseline:
    def test_known_baselines(self):
        assert target_baseline(8, TaskName.VOP) == 200
        assert target_baseline(8, TaskName.TICKETS) == 160
        assert target_baseline(4, TaskName.DISPATCH) == 68

    def test_missing_baseline_is_zero(self):
        assert target_baseline(8, TaskName.CQ) == 0
        assert target_baseline(12, TaskName.VOP) == 0
