"""Coverage summary models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gencov.models.modes import COVERAGE_METRICS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gencov.models.modes import ReportMode


def format_line_data(data: Mapping[int, int]) -> str:
    """Serialize a per-line mapping as ``"1=1;2=0"`` in ascending line order."""
    return ";".join(f"{line}={value}" for line, value in sorted(data.items()))


@dataclass(frozen=True)
class LineCoverageSummary:
    """Line coverage of one file."""

    lines_to_cover: int
    """Number of distinct lines reported as coverable."""

    covered_lines: int
    """Number of those lines hit at least once."""

    hits_by_line: dict[int, int] = field(default_factory=dict)
    """Highest hit value per line, in ascending line order."""

    @property
    def uncovered_lines(self) -> int:
        """Return the number of coverable lines never hit."""
        return self.lines_to_cover - self.covered_lines


@dataclass(frozen=True)
class ConditionCoverageSummary:
    """Branch/condition coverage of one file."""

    conditions_to_cover: int
    """Sum of the branch counts declared per line."""

    covered_conditions: int
    """Sum of the highest covered-branch counts per line."""

    conditions_by_line: dict[int, int] = field(default_factory=dict)
    """Declared branch count per line."""

    covered_conditions_by_line: dict[int, int] = field(default_factory=dict)
    """Highest covered-branch count per line."""

    @property
    def uncovered_conditions(self) -> int:
        """Return the number of branches never covered."""
        return self.conditions_to_cover - self.covered_conditions


@dataclass(frozen=True)
class CoverageSummary:
    """Finalized coverage of one file for one report mode.

    A part is ``None`` when the file has nothing to report for it: no
    coverable line means no line measures at all, rather than zeros.
    """

    lines: LineCoverageSummary | None = None
    conditions: ConditionCoverageSummary | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when the summary produces no measure."""
        return self.lines is None and self.conditions is None

    def to_measures(self, mode: ReportMode) -> dict[str, int | str]:
        """Return the measures of this summary keyed by the metric names of *mode*."""
        names = COVERAGE_METRICS[mode]
        measures: dict[str, int | str] = {}
        if self.lines is not None:
            measures[names.lines_to_cover] = self.lines.lines_to_cover
            measures[names.uncovered_lines] = self.lines.uncovered_lines
            measures[names.line_hits_data] = format_line_data(self.lines.hits_by_line)
        if self.conditions is not None:
            measures[names.conditions_to_cover] = self.conditions.conditions_to_cover
            measures[names.uncovered_conditions] = self.conditions.uncovered_conditions
            measures[names.conditions_by_line] = format_line_data(
                self.conditions.conditions_by_line
            )
            measures[names.covered_conditions_by_line] = format_line_data(
                self.conditions.covered_conditions_by_line
            )
        return measures
