"""Output of imported report data: rich terminal tables and JSON documents."""

from gencov.reporters.json_reporter import JSONReporter
from gencov.reporters.terminal import CLIReporter, reporter

__all__ = ["CLIReporter", "JSONReporter", "reporter"]
