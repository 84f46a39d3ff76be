"""Import of one report mode: parse every report, merge per file, finalize.

A ``ReportImporter`` owns the per-file aggregators of exactly one mode.
Reports are parsed one after the other; each ``file`` block is resolved to a
project file, unknown files are counted and skipped, and every record of a
known file is merged into that file's aggregator. The first error of any
kind aborts the whole mode and is re-raised with the report path attached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from gencov.aggregators import CoverageAggregator, UnitTestAggregator
from gencov.parsing.errors import MergeConflictError, ReportError, SourceNotFoundError
from gencov.parsing.report_parser import CaseRecord, LineToCoverRecord, ReportParser

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import BinaryIO

    from gencov.models.coverage import CoverageSummary
    from gencov.models.modes import ReportMode
    from gencov.models.test_result import CaseResult, UnitTestSummary
    from gencov.parsing.report_parser import Record
    from gencov.resources import (
        MeasureSink,
        MeasureValue,
        ResourceResolver,
        SourceFile,
        TestPlanSink,
    )

logger = logging.getLogger(__name__)

MAX_UNKNOWN_FILE_SAMPLE = 5


@dataclass
class UnknownFileTracker:
    """Count report paths that match no project file, keeping the first few."""

    count: int = 0
    sample: list[str] = field(default_factory=list)

    def add(self, path: str) -> None:
        self.count += 1
        if len(self.sample) < MAX_UNKNOWN_FILE_SAMPLE:
            self.sample.append(path)


@dataclass(frozen=True)
class FileSummary:
    """Finalized data of one project file for one mode."""

    source: SourceFile
    coverage: CoverageSummary | None = None
    tests: UnitTestSummary | None = None
    test_cases: tuple[CaseResult, ...] = ()

    def measures(self, mode: ReportMode) -> dict[str, MeasureValue]:
        """Return the measures to save for this file, keyed by metric name."""
        if self.coverage is not None:
            return dict(self.coverage.to_measures(mode))
        if self.tests is not None:
            return dict(self.tests.to_measures())
        return {}


@dataclass(frozen=True)
class ImportResult:
    """Outcome of importing all reports of one mode."""

    mode: ReportMode
    files: dict[str, FileSummary] = field(default_factory=dict)
    """Summaries by file key, in key order."""

    unknown_file_count: int = 0
    unknown_file_sample: tuple[str, ...] = ()

    @property
    def matched_file_count(self) -> int:
        return len(self.files)


class ReportImporter:
    """Parse and merge the reports of one mode."""

    def __init__(
        self,
        mode: ReportMode,
        resolver: ResourceResolver,
        *,
        base_dir: str | Path | None = None,
    ) -> None:
        self.mode = mode
        self._resolver = resolver
        self._base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self._parser = ReportParser(mode)
        self._sources: dict[str, SourceFile] = {}
        self._coverage: dict[str, CoverageAggregator] = {}
        self._tests: dict[str, UnitTestAggregator] = {}
        self._unknown = UnknownFileTracker()

    def report_location(self, report: str | Path) -> Path:
        """Return the absolute location of *report* (relative to the base dir)."""
        path = Path(report)
        if not path.is_absolute():
            path = self._base_dir / path
        return path.absolute()

    def parse(self, report: str | Path) -> None:
        """Parse one report file and merge its content.

        Raises:
            SourceNotFoundError: The report file does not exist.
            ReportError: The report is invalid or conflicts with merged data.
        """
        path = self.report_location(report)
        logger.info("Parsing %s", path)
        if not path.is_file():
            error = SourceNotFoundError(f"Cannot find {self.mode.label} report to parse")
            error.locate(str(path), self.mode.label)
            raise error
        try:
            with path.open("rb") as stream:
                self.parse_stream(stream)
        except ReportError as e:
            e.locate(str(path), self.mode.label)
            raise
        except OSError as e:
            error = ReportError(f"Cannot read {self.mode.label} report: {e.strerror or e}")
            error.locate(str(path), self.mode.label)
            raise error from e

    def parse_stream(self, stream: BinaryIO) -> None:
        """Parse a report from an open binary stream and merge its content."""
        for block in self._parser.files(stream):
            source = self._resolver.resolve(block.path)
            if source is None:
                self._unknown.add(block.path)
                continue
            self._register(source)
            for record in block.records():
                try:
                    self._apply(source, record)
                except MergeConflictError as e:
                    e.line_number = record.source_line
                    raise

    def _register(self, source: SourceFile) -> None:
        if source.key in self._sources:
            return
        self._sources[source.key] = source
        if self.mode.is_coverage:
            self._coverage[source.key] = CoverageAggregator()
        else:
            self._tests[source.key] = UnitTestAggregator()

    def _apply(self, source: SourceFile, record: Record) -> None:
        if isinstance(record, LineToCoverRecord):
            self._coverage[source.key].record_line(
                record.line_number,
                record.covered,
                record.branches_to_cover,
                record.covered_branches,
            )
        elif isinstance(record, CaseRecord):
            self._tests[source.key].record_test(
                record.name,
                record.status,
                record.duration,
                record.message,
                record.stack_trace,
            )

    def finalize(self) -> ImportResult:
        """Finalize every aggregator of the mode."""
        files: dict[str, FileSummary] = {}
        for key in sorted(self._sources):
            source = self._sources[key]
            if self.mode.is_coverage:
                files[key] = FileSummary(source=source, coverage=self._coverage[key].finalize())
            else:
                aggregator = self._tests[key]
                files[key] = FileSummary(
                    source=source,
                    tests=aggregator.finalize(),
                    test_cases=tuple(aggregator.test_cases),
                )
        return ImportResult(
            mode=self.mode,
            files=files,
            unknown_file_count=self._unknown.count,
            unknown_file_sample=tuple(self._unknown.sample),
        )


def parse_and_aggregate(
    mode: ReportMode,
    reports: Iterable[str | Path],
    resolver: ResourceResolver,
    *,
    base_dir: str | Path | None = None,
) -> ImportResult:
    """Import every report of *mode*, in the given order, and finalize the result."""
    importer = ReportImporter(mode, resolver, base_dir=base_dir)
    for report in reports:
        importer.parse(report)
    result = importer.finalize()
    _log_result(result)
    return result


def save_result(
    result: ImportResult,
    measure_sink: MeasureSink,
    test_plan: TestPlanSink | None = None,
) -> None:
    """Hand the finalized measures (and test cases) of *result* to the sinks."""
    for summary in result.files.values():
        for metric, value in summary.measures(result.mode).items():
            measure_sink.save(summary.source, metric, value)
        if test_plan is None:
            continue
        for case in summary.test_cases:
            test_plan.add_test_case(
                summary.source,
                case.name,
                case.duration,
                case.status,
                case.message,
                case.stack_trace,
            )


def _log_result(result: ImportResult) -> None:
    label = result.mode.label
    logger.info("Imported %s data for %d files", label, result.matched_file_count)
    if result.unknown_file_count > 0:
        logger.info(
            "%s data ignored for %d unknown files, including:\n%s",
            label,
            result.unknown_file_count,
            "\n".join(result.unknown_file_sample),
        )
