"""Accumulation of line and branch coverage for one file in one report mode.

Records for the same file may arrive from any number of report fragments.
Hits and covered branches are merged with ``max``, so the final state does
not depend on the order fragments are applied in, and re-applying the same
fragment changes nothing. A line's declared branch count, once recorded,
can never change.
"""

from __future__ import annotations

from gencov.models.coverage import (
    ConditionCoverageSummary,
    CoverageSummary,
    LineCoverageSummary,
)
from gencov.parsing.errors import BranchCountMismatchError


class CoverageAggregator:
    """Accumulate ``lineToCover`` records of one file."""

    def __init__(self) -> None:
        self._hits_by_line: dict[int, int] = {}
        self._conditions_by_line: dict[int, int] = {}
        self._covered_conditions_by_line: dict[int, int] = {}
        self._covered_lines = 0
        self._conditions_to_cover = 0
        self._covered_conditions = 0

    @property
    def lines_to_cover(self) -> int:
        return len(self._hits_by_line)

    @property
    def covered_lines(self) -> int:
        return self._covered_lines

    @property
    def conditions_to_cover(self) -> int:
        return self._conditions_to_cover

    @property
    def covered_conditions(self) -> int:
        return self._covered_conditions

    def record_line(
        self,
        line_number: int,
        covered: bool,
        branches_to_cover: int | None = None,
        covered_branches: int | None = None,
    ) -> None:
        """Merge one line record into the accumulated state.

        Raises:
            BranchCountMismatchError: The line already has a different branch count.
        """
        self._set_hits(line_number, 1 if covered else 0)
        if branches_to_cover:
            self._set_conditions(line_number, branches_to_cover, covered_branches or 0)

    def _set_hits(self, line_number: int, hits: int) -> None:
        old = self._hits_by_line.get(line_number)
        if old is None:
            self._hits_by_line[line_number] = hits
            if hits > 0:
                self._covered_lines += 1
            return
        self._hits_by_line[line_number] = max(old, hits)
        if old == 0 and hits > 0:
            self._covered_lines += 1

    def _set_conditions(self, line_number: int, conditions: int, covered: int) -> None:
        declared = self._conditions_by_line.get(line_number)
        if declared is None:
            self._conditions_by_line[line_number] = conditions
            self._covered_conditions_by_line[line_number] = covered
            self._conditions_to_cover += conditions
            self._covered_conditions += covered
            return
        if declared != conditions:
            raise BranchCountMismatchError(
                f"Line {line_number} was already reported with {declared} branches "
                f"to cover, got {conditions}"
            )
        old = self._covered_conditions_by_line[line_number]
        new = max(old, covered)
        self._covered_conditions_by_line[line_number] = new
        self._covered_conditions += new - old

    def finalize(self) -> CoverageSummary:
        """Project the accumulated state into a summary (the aggregator is unchanged)."""
        lines = None
        if self.lines_to_cover > 0:
            lines = LineCoverageSummary(
                lines_to_cover=self.lines_to_cover,
                covered_lines=self._covered_lines,
                hits_by_line=dict(sorted(self._hits_by_line.items())),
            )
        conditions = None
        if self._conditions_to_cover > 0:
            conditions = ConditionCoverageSummary(
                conditions_to_cover=self._conditions_to_cover,
                covered_conditions=self._covered_conditions,
                conditions_by_line=dict(sorted(self._conditions_by_line.items())),
                covered_conditions_by_line=dict(
                    sorted(self._covered_conditions_by_line.items())
                ),
            )
        return CoverageSummary(lines=lines, conditions=conditions)
