"""Report modes and the metric names each mode's summaries are saved under.

The accumulation of coverage data is identical for every coverage mode; a
mode only decides which metric names a finalized summary is written to.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ReportMode(Enum):
    """Kind of report being imported."""

    COVERAGE = "coverage"
    IT_COVERAGE = "it-coverage"
    OVERALL_COVERAGE = "overall-coverage"
    UNIT_TEST = "unit-test"

    @property
    def label(self) -> str:
        """Human-readable name used in logs and error messages."""
        return _LABELS[self]

    @property
    def root_element(self) -> str:
        """Name the document root must have for this mode."""
        return "unitTest" if self is ReportMode.UNIT_TEST else "coverage"

    @property
    def is_coverage(self) -> bool:
        """Return True for the coverage-family modes."""
        return self is not ReportMode.UNIT_TEST


_LABELS = {
    ReportMode.COVERAGE: "coverage",
    ReportMode.IT_COVERAGE: "IT coverage",
    ReportMode.OVERALL_COVERAGE: "overall coverage",
    ReportMode.UNIT_TEST: "unit test",
}


@dataclass(frozen=True)
class CoverageMetricNames:
    """Metric names a coverage summary is saved under."""

    lines_to_cover: str
    uncovered_lines: str
    line_hits_data: str
    conditions_to_cover: str
    uncovered_conditions: str
    conditions_by_line: str
    covered_conditions_by_line: str

    @classmethod
    def with_prefix(cls, prefix: str) -> CoverageMetricNames:
        """Build the name set for a mode whose metrics share *prefix*."""
        return cls(
            lines_to_cover=f"{prefix}lines_to_cover",
            uncovered_lines=f"{prefix}uncovered_lines",
            line_hits_data=f"{prefix}coverage_line_hits_data",
            conditions_to_cover=f"{prefix}conditions_to_cover",
            uncovered_conditions=f"{prefix}uncovered_conditions",
            conditions_by_line=f"{prefix}conditions_by_line",
            covered_conditions_by_line=f"{prefix}covered_conditions_by_line",
        )


@dataclass(frozen=True)
class UnitTestMetricNames:
    """Metric names a unit-test summary is saved under."""

    tests: str = "tests"
    skipped: str = "skipped_tests"
    errors: str = "test_errors"
    failures: str = "test_failures"
    execution_time: str = "test_execution_time"
    success_density: str = "test_success_density"


COVERAGE_METRICS: dict[ReportMode, CoverageMetricNames] = {
    ReportMode.COVERAGE: CoverageMetricNames.with_prefix(""),
    ReportMode.IT_COVERAGE: CoverageMetricNames.with_prefix("it_"),
    ReportMode.OVERALL_COVERAGE: CoverageMetricNames.with_prefix("overall_"),
}

UNIT_TEST_METRICS = UnitTestMetricNames()
