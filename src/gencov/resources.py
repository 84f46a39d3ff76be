"""Collaborators the importer relies on: file resolution and result sinks.

The importer never touches the project layout or a storage backend itself.
It asks a ``ResourceResolver`` which project file a report path designates
and hands finalized measures and test cases to a ``MeasureSink`` and an
optional ``TestPlanSink``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from gencov.models.test_result import CaseResult, CaseStatus

logger = logging.getLogger(__name__)

MeasureValue = int | float | str


@dataclass(frozen=True)
class SourceFile:
    """A project file that report data is attached to."""

    key: str
    """Stable identity of the file (POSIX path relative to the project base dir)."""

    path: Path
    """Absolute location on disk."""


class ResourceResolver(Protocol):
    """Map a path found in a report to a project file."""

    def resolve(self, logical_path: str) -> SourceFile | None:
        """Return the designated file, or ``None`` when it is unknown to the project."""


class MeasureSink(Protocol):
    """Receive the finalized measures of each file."""

    def save(self, source: SourceFile, metric: str, value: MeasureValue) -> None:
        """Store *value* as metric *metric* of *source*."""


class TestPlanSink(Protocol):
    """Receive the individual test cases of each file."""

    def add_test_case(
        self,
        source: SourceFile,
        name: str,
        duration_ms: int,
        status: CaseStatus,
        message: str | None,
        stack_trace: str | None,
    ) -> None:
        """Record one test case of *source*."""


class FileSystemResolver:
    """Resolve report paths against a project base directory.

    Relative paths are taken relative to *base_dir*. A path is known when it
    designates an existing regular file located inside *base_dir*.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir).resolve()

    def resolve(self, logical_path: str) -> SourceFile | None:
        candidate = Path(logical_path)
        if not candidate.is_absolute():
            candidate = self.base_dir / candidate
        try:
            candidate = candidate.resolve()
            relative = candidate.relative_to(self.base_dir)
            if not candidate.is_file():
                return None
        except ValueError:
            logger.debug("Report path %s is outside of %s", logical_path, self.base_dir)
            return None
        except OSError as e:
            logger.debug("Cannot access report path %s: %s", logical_path, e)
            return None
        return SourceFile(key=relative.as_posix(), path=candidate)


@dataclass
class InMemoryMeasureSink:
    """Measure sink that keeps everything in a dict keyed by file key."""

    measures: dict[str, dict[str, MeasureValue]] = field(default_factory=dict)

    def save(self, source: SourceFile, metric: str, value: MeasureValue) -> None:
        self.measures.setdefault(source.key, {})[metric] = value


@dataclass
class InMemoryTestPlan:
    """Test plan sink that keeps the test cases of each file in a list."""

    cases: dict[str, list[CaseResult]] = field(default_factory=dict)

    def add_test_case(
        self,
        source: SourceFile,
        name: str,
        duration_ms: int,
        status: CaseStatus,
        message: str | None,
        stack_trace: str | None,
    ) -> None:
        self.cases.setdefault(source.key, []).append(
            CaseResult(
                name=name,
                status=status,
                duration=duration_ms,
                message=message,
                stack_trace=stack_trace,
            )
        )
