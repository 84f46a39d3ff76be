"""Data models for report modes, coverage summaries and test results."""

from gencov.models.coverage import (
    ConditionCoverageSummary,
    CoverageSummary,
    LineCoverageSummary,
    format_line_data,
)
from gencov.models.modes import (
    COVERAGE_METRICS,
    UNIT_TEST_METRICS,
    CoverageMetricNames,
    ReportMode,
    UnitTestMetricNames,
)
from gencov.models.test_result import CaseResult, CaseStatus, UnitTestSummary

__all__ = [
    "COVERAGE_METRICS",
    "UNIT_TEST_METRICS",
    "CaseResult",
    "CaseStatus",
    "ConditionCoverageSummary",
    "CoverageMetricNames",
    "CoverageSummary",
    "LineCoverageSummary",
    "ReportMode",
    "UnitTestMetricNames",
    "UnitTestSummary",
    "format_line_data",
]
