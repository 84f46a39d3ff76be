"""Per-file accumulators for coverage and unit-test records."""

from gencov.aggregators.coverage import CoverageAggregator
from gencov.aggregators.unit_test import UnitTestAggregator

__all__ = ["CoverageAggregator", "UnitTestAggregator"]
