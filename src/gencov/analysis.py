"""Run the import of every configured report mode and save the results.

Modes run in a fixed order: coverage, IT coverage, overall coverage, then
unit tests. A mode whose reports all parse is saved before the next mode
starts. A missing report stops the run (modes already saved stay saved);
any other report error propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from gencov.importer import parse_and_aggregate, save_result
from gencov.models.modes import ReportMode
from gencov.parsing.errors import SourceNotFoundError
from gencov.resources import FileSystemResolver

if TYPE_CHECKING:
    from gencov.config import GencovConfig
    from gencov.importer import ImportResult
    from gencov.resources import MeasureSink, ResourceResolver, TestPlanSink

logger = logging.getLogger(__name__)

MODE_ORDER = (
    ReportMode.COVERAGE,
    ReportMode.IT_COVERAGE,
    ReportMode.OVERALL_COVERAGE,
    ReportMode.UNIT_TEST,
)


@dataclass
class AnalysisResult:
    """Modes imported during one run."""

    results: list[ImportResult] = field(default_factory=list)
    """Results of the modes that were imported and saved, in run order."""

    missing_report: str | None = None
    """Absolute path of the report that stopped the run, if any."""

    @property
    def completed(self) -> bool:
        """Return True when every configured mode was imported."""
        return self.missing_report is None


def run_analysis(
    config: GencovConfig,
    measure_sink: MeasureSink,
    test_plan: TestPlanSink | None = None,
    *,
    resolver: ResourceResolver | None = None,
) -> AnalysisResult:
    """Import the configured reports of every mode and save each mode's result.

    Raises:
        ReportError: A report is malformed, invalid or conflicting.
    """
    base_dir = Path(config.project.base_dir)
    if resolver is None:
        resolver = FileSystemResolver(base_dir)

    analysis = AnalysisResult()
    for mode in MODE_ORDER:
        reports = config.reports.paths_for(mode)
        if not reports:
            continue
        try:
            result = parse_and_aggregate(mode, reports, resolver, base_dir=base_dir)
        except SourceNotFoundError as e:
            logger.warning("Cannot find %s report to parse: %s", mode.label, e.report_path)
            analysis.missing_report = e.report_path
            break
        save_result(result, measure_sink, test_plan)
        analysis.results.append(result)
    return analysis
