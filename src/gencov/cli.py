"""gencov CLI: top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from gencov import __version__
from gencov.analysis import run_analysis
from gencov.config import CONFIG_FILE_NAME, GencovConfig, load_config, validate_config
from gencov.models.modes import ReportMode
from gencov.parsing.errors import ReportError
from gencov.reporters.json_reporter import JSONReporter
from gencov.reporters.terminal import reporter
from gencov.resources import InMemoryMeasureSink, InMemoryTestPlan

console = Console()

_PATH_OPTION_HELP = "Project root directory."


def _configure_logging(*, verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _config_to_dict(config: GencovConfig) -> dict[str, Any]:
    data = asdict(config)
    data.pop("raw", None)
    return data


def _load_valid_config(path: str) -> GencovConfig:
    try:
        config = load_config(path)
    except (OSError, yaml.YAMLError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(error)
        raise click.Abort
    return config


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every parsed report.")
@click.version_option(version=__version__, prog_name="gencov")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """gencov: import generic coverage and unit-test execution reports."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose=verbose)


@cli.command("import")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help=_PATH_OPTION_HELP,
)
@click.option("--coverage", "coverage", multiple=True, help="Coverage report (repeatable).")
@click.option(
    "--it-coverage", "it_coverage", multiple=True, help="IT coverage report (repeatable)."
)
@click.option(
    "--overall-coverage",
    "overall_coverage",
    multiple=True,
    help="Overall coverage report (repeatable).",
)
@click.option("--unit-test", "unit_test", multiple=True, help="Unit-test report (repeatable).")
@click.option("--json-output", "as_json", is_flag=True, help="Output JSON instead of tables.")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the JSON document to this file.",
)
def import_reports(
    path: str,
    coverage: tuple[str, ...],
    it_coverage: tuple[str, ...],
    overall_coverage: tuple[str, ...],
    unit_test: tuple[str, ...],
    *,
    as_json: bool,
    output_file: Path | None,
) -> None:
    """Import the configured reports and print the measures of every file.

    Report paths given on the command line replace the configured ones of
    their mode.

    Example:
      gencov import --coverage build/coverage.xml --unit-test build/tests.xml
    """
    config = _load_valid_config(path)
    overrides = {
        ReportMode.COVERAGE: coverage,
        ReportMode.IT_COVERAGE: it_coverage,
        ReportMode.OVERALL_COVERAGE: overall_coverage,
        ReportMode.UNIT_TEST: unit_test,
    }
    for mode, paths in overrides.items():
        if paths:
            config.reports.set_paths(mode, list(paths))

    if config.reports.is_empty:
        reporter.print_warning(
            f"No report configured. List reports in {CONFIG_FILE_NAME} or on the command line."
        )
        return

    try:
        analysis = run_analysis(config, InMemoryMeasureSink(), InMemoryTestPlan())
    except ReportError as e:
        reporter.print_error(str(e))
        raise click.Abort from e

    json_path = output_file or (Path(config.output.json_path) if config.output.json_path else None)
    if as_json or config.output.format == "json" or output_file is not None:
        json_reporter = JSONReporter()
        if json_path is not None:
            json_reporter.generate(json_path, analysis)
            reporter.print_success(f"JSON report written to {json_path}")
        else:
            click.echo(json_reporter.generate_string(analysis))
    else:
        reporter.print_analysis(analysis)

    if not analysis.completed:
        raise click.Abort


@cli.group("config")
def config_group() -> None:
    """Inspect `.gencov.yml` configuration values."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help=_PATH_OPTION_HELP,
)
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output as JSON instead of YAML.",
)
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration.

    Shows the complete configuration with environment variables resolved.

    Example:
      gencov config show
      gencov config show --json-output
    """
    try:
        config = load_config(path)
    except (OSError, yaml.YAMLError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    config_dict = _config_to_dict(config)
    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        console.print()
        console.print("[bold cyan]Configuration:[/bold cyan]")
        console.print()
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help=_PATH_OPTION_HELP,
)
def config_validate(path: str) -> None:
    """Validate `.gencov.yml` configuration.

    Example:
      gencov config validate
    """
    try:
        config = load_config(path)
    except (OSError, yaml.YAMLError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)

    if not errors:
        reporter.print_success("Configuration is valid!")
        return

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    console.print()
    for idx, error in enumerate(errors, start=1):
        console.print(f"  {idx}. [red]{error}[/red]")
    console.print()
    console.print(
        f"[dim]Fix these errors in {CONFIG_FILE_NAME} and run 'gencov config validate' again.[/dim]"
    )
    raise click.Abort
