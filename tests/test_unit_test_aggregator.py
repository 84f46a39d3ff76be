"""Tests for per-file unit-test accumulation (aggregators/unit_test.py)."""

from __future__ import annotations

import pytest

from gencov.aggregators.unit_test import UnitTestAggregator, _success_density
from gencov.models.test_result import CaseStatus
from gencov.parsing.errors import DuplicateTestError


def _aggregator(*cases: tuple[str, CaseStatus, int]) -> UnitTestAggregator:
    aggregator = UnitTestAggregator()
    for name, status, duration in cases:
        aggregator.record_test(name, status, duration)
    return aggregator


# ── _success_density ─────────────────────────────────────────────


class TestSuccessDensity:
    def test_all_passing(self) -> None:
        assert _success_density(4, 0, 0) == 100.0

    def test_failures_and_errors_count_against(self) -> None:
        assert _success_density(4, 1, 1) == 50.0

    def test_rounded_half_up_to_two_decimals(self) -> None:
        assert _success_density(3, 0, 1) == 66.67
        assert _success_density(3, 1, 1) == 33.33
        assert _success_density(8, 0, 1) == 87.5

    def test_half_is_rounded_up(self) -> None:
        # 1 success out of 32 is exactly 3.125%
        assert _success_density(32, 0, 31) == 3.13
        assert _success_density(32, 31, 0) == 3.13


# ── Recording ────────────────────────────────────────────────────


class TestRecordTest:
    def test_summary(self) -> None:
        aggregator = _aggregator(
            ("test1", CaseStatus.OK, 500),
            ("test2", CaseStatus.SKIPPED, 200),
            ("test3", CaseStatus.FAILURE, 400),
            ("test4", CaseStatus.OK, 300),
        )
        summary = aggregator.finalize()
        assert summary is not None
        assert summary.test_count == 4
        assert summary.skipped == 1
        assert summary.failures == 1
        assert summary.errors == 0
        assert summary.total_duration == 1400
        assert summary.success_density == 75.0

    def test_skipped_tests_count_as_successful(self) -> None:
        summary = _aggregator(("a", CaseStatus.SKIPPED, 0)).finalize()
        assert summary.success_density == 100.0

    def test_errors_counted(self) -> None:
        summary = _aggregator(("a", CaseStatus.ERROR, 1), ("b", CaseStatus.OK, 1)).finalize()
        assert summary.errors == 1
        assert summary.success_density == 50.0

    def test_duplicate_name(self) -> None:
        aggregator = _aggregator(("test1", CaseStatus.OK, 1))
        with pytest.raises(DuplicateTestError, match='"test1"'):
            aggregator.record_test("test1", CaseStatus.FAILURE, 2)
        assert aggregator.test_count == 1

    def test_cases_kept_in_recording_order(self) -> None:
        aggregator = UnitTestAggregator()
        aggregator.record_test("zeta", CaseStatus.OK, 1)
        aggregator.record_test("alpha", CaseStatus.FAILURE, 2, "boom", "trace")
        cases = aggregator.test_cases
        assert [case.name for case in cases] == ["zeta", "alpha"]
        assert cases[1].message == "boom"
        assert cases[1].stack_trace == "trace"

    def test_no_tests_finalizes_to_none(self) -> None:
        assert UnitTestAggregator().finalize() is None


# ── Measures ─────────────────────────────────────────────────────


class TestMeasures:
    def test_unit_test_measures(self) -> None:
        summary = _aggregator(
            ("a", CaseStatus.OK, 10),
            ("b", CaseStatus.ERROR, 20),
            ("c", CaseStatus.SKIPPED, 0),
        ).finalize()
        assert summary.to_measures() == {
            "skipped_tests": 1,
            "tests": 3,
            "test_errors": 1,
            "test_failures": 0,
            "test_execution_time": 30,
            "test_success_density": 66.67,
        }
