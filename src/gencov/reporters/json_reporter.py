"""JSON reporter: serialize imported measures for downstream tooling."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from gencov import __version__

if TYPE_CHECKING:
    from pathlib import Path

    from gencov.analysis import AnalysisResult
    from gencov.importer import ImportResult

logger = logging.getLogger(__name__)


class JSONReporter:
    """Generate a JSON document holding the measures of every imported mode."""

    def generate(self, output_path: Path, analysis: AnalysisResult) -> Path:
        """Write the JSON report to *output_path* and return it."""
        report = build_report(analysis)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(report, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, analysis: AnalysisResult) -> str:
        """Return the JSON report as a string."""
        return json.dumps(build_report(analysis), indent=2, ensure_ascii=False)


def build_report(analysis: AnalysisResult) -> dict[str, Any]:
    """Build the JSON report structure."""
    return {
        "tool": "gencov",
        "version": __version__,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "completed": analysis.completed,
        "missing_report": analysis.missing_report,
        "modes": {result.mode.value: _serialize_result(result) for result in analysis.results},
    }


def _serialize_result(result: ImportResult) -> dict[str, Any]:
    """Serialize the measures of one mode, keyed by file."""
    files: dict[str, Any] = {}
    for key, summary in result.files.items():
        entry: dict[str, Any] = dict(summary.measures(result.mode))
        if summary.test_cases:
            entry["test_cases"] = [
                {
                    "name": case.name,
                    "status": case.status.value,
                    "duration": case.duration,
                    "message": case.message,
                    "stack_trace": case.stack_trace,
                }
                for case in summary.test_cases
            ]
        files[key] = entry
    return {
        "files": files,
        "matched_files": result.matched_file_count,
        "unknown_files": result.unknown_file_count,
        "unknown_file_sample": list(result.unknown_file_sample),
    }
