"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from gencov.analysis import AnalysisResult
    from gencov.importer import FileSummary, ImportResult

console = Console()


_PERFECT_RATE = 100.0
_GOOD_RATE = 80.0


def _rate_color(rate: float) -> str:
    """Return a Rich color name for a given percentage."""
    if rate >= _PERFECT_RATE:
        return "green"
    if rate >= _GOOD_RATE:
        return "yellow"
    return "red"


def _percent(covered: int, total: int) -> str:
    """Format *covered* out of *total* as a colored percentage."""
    if total == 0:
        return "[dim]-[/dim]"
    rate = covered / total * 100
    color = _rate_color(rate)
    return f"[{color}]{rate:.1f}%[/{color}]"


class CLIReporter:
    """Rich terminal output for imported report data."""

    def __init__(self) -> None:
        """Initialize the CLI reporter."""
        self.console = console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_analysis(self, analysis: AnalysisResult) -> None:
        """Print one table per imported mode, then the run outcome."""
        if not analysis.results and analysis.completed:
            self.print_warning("No report configured")
            return
        for result in analysis.results:
            self.print_import_result(result)
        if analysis.completed:
            self.print_success(f"Imported {len(analysis.results)} report mode(s)")
        else:
            self.print_warning(
                f"Import stopped, cannot find report: {analysis.missing_report}"
            )

    def print_import_result(self, result: ImportResult) -> None:
        """Print the per-file summary table of one mode."""
        if result.mode.is_coverage:
            self._print_coverage_table(result)
        else:
            self._print_unit_test_table(result)

        if result.unknown_file_count:
            self.print_warning(
                f"{result.mode.label} data ignored for {result.unknown_file_count} "
                f"unknown file(s), including:"
            )
            for path in result.unknown_file_sample:
                self.console.print(f"    [dim]{path}[/dim]")

    def _print_coverage_table(self, result: ImportResult) -> None:
        table = Table(
            title=f"{result.mode.label.capitalize()} ({result.matched_file_count} files)",
            title_style="bold cyan",
        )
        table.add_column("File", style="bold")
        table.add_column("Lines", justify="right")
        table.add_column("Covered", justify="right")
        table.add_column("Line Coverage", justify="right")
        table.add_column("Conditions", justify="right")
        table.add_column("Covered", justify="right")
        table.add_column("Condition Coverage", justify="right")

        total_lines = total_covered_lines = total_conditions = total_covered_conditions = 0
        for key, summary in result.files.items():
            row = _coverage_row(summary)
            table.add_row(key, *row)
            coverage = summary.coverage
            if coverage is not None and coverage.lines is not None:
                total_lines += coverage.lines.lines_to_cover
                total_covered_lines += coverage.lines.covered_lines
            if coverage is not None and coverage.conditions is not None:
                total_conditions += coverage.conditions.conditions_to_cover
                total_covered_conditions += coverage.conditions.covered_conditions

        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            str(total_lines),
            str(total_covered_lines),
            _percent(total_covered_lines, total_lines),
            str(total_conditions),
            str(total_covered_conditions),
            _percent(total_covered_conditions, total_conditions),
        )
        self.console.print(table)

    def _print_unit_test_table(self, result: ImportResult) -> None:
        table = Table(
            title=f"Unit tests ({result.matched_file_count} files)",
            title_style="bold cyan",
        )
        table.add_column("File", style="bold")
        table.add_column("Tests", justify="right")
        table.add_column("Skipped", justify="right")
        table.add_column("Failures", justify="right")
        table.add_column("Errors", justify="right")
        table.add_column("Duration", justify="right")
        table.add_column("Success", justify="right")

        for key, summary in result.files.items():
            tests = summary.tests
            if tests is None:
                table.add_row(key, "0", "-", "-", "-", "-", "[dim]-[/dim]")
                continue
            color = _rate_color(tests.success_density)
            table.add_row(
                key,
                str(tests.test_count),
                str(tests.skipped),
                f"[red]{tests.failures}[/red]" if tests.failures else "0",
                f"[magenta]{tests.errors}[/magenta]" if tests.errors else "0",
                f"{tests.total_duration}ms",
                f"[{color}]{tests.success_density:.2f}%[/{color}]",
            )
        self.console.print(table)


def _coverage_row(summary: FileSummary) -> tuple[str, ...]:
    coverage = summary.coverage
    lines = coverage.lines if coverage is not None else None
    conditions = coverage.conditions if coverage is not None else None
    line_cells = (
        (
            str(lines.lines_to_cover),
            str(lines.covered_lines),
            _percent(lines.covered_lines, lines.lines_to_cover),
        )
        if lines is not None
        else ("-", "-", "[dim]-[/dim]")
    )
    condition_cells = (
        (
            str(conditions.conditions_to_cover),
            str(conditions.covered_conditions),
            _percent(conditions.covered_conditions, conditions.conditions_to_cover),
        )
        if conditions is not None
        else ("-", "-", "[dim]-[/dim]")
    )
    return line_cells + condition_cells


reporter = CLIReporter()
