"""Configuration parsing from ``.gencov.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gencov.models.modes import ReportMode

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gencov.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_OUTPUT_FORMATS = ("terminal", "json")

# Configuration key and environment fallback of each mode's report list
_REPORT_KEYS: dict[ReportMode, tuple[str, str]] = {
    ReportMode.COVERAGE: ("coverage", "GENCOV_COVERAGE_REPORT_PATHS"),
    ReportMode.IT_COVERAGE: ("it_coverage", "GENCOV_IT_COVERAGE_REPORT_PATHS"),
    ReportMode.OVERALL_COVERAGE: ("overall_coverage", "GENCOV_OVERALL_COVERAGE_REPORT_PATHS"),
    ReportMode.UNIT_TEST: ("unit_test", "GENCOV_UNIT_TEST_REPORT_PATHS"),
}

_DEPRECATED_REPORT_PATH_KEY = "report_path"


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def split_paths(value: Any) -> list[str]:
    """Turn a list or a comma-separated string into a clean list of paths."""
    if value is None:
        return []
    items = value if isinstance(value, list) else str(value).split(",")
    return [str(item).strip() for item in items if str(item).strip()]


@dataclass
class ProjectConfig:
    """Project-level configuration."""

    base_dir: str
    """Directory report paths and reported file paths are resolved against."""


@dataclass
class ReportsConfig:
    """Report files to import, per mode."""

    coverage: list[str] = field(default_factory=list)
    """Coverage reports."""

    it_coverage: list[str] = field(default_factory=list)
    """Integration-test coverage reports."""

    overall_coverage: list[str] = field(default_factory=list)
    """Overall coverage reports."""

    unit_test: list[str] = field(default_factory=list)
    """Unit-test execution reports."""

    def paths_for(self, mode: ReportMode) -> list[str]:
        """Return the configured reports of *mode*."""
        return list(getattr(self, _REPORT_KEYS[mode][0]))

    def set_paths(self, mode: ReportMode, paths: list[str]) -> None:
        """Replace the configured reports of *mode*."""
        setattr(self, _REPORT_KEYS[mode][0], list(paths))

    @property
    def is_empty(self) -> bool:
        """Return True when no report is configured for any mode."""
        return not any(self.paths_for(mode) for mode in ReportMode)


@dataclass
class OutputConfig:
    """Output configuration."""

    format: str = "terminal"
    """Output format: terminal or json."""

    json_path: str = ""
    """File to write the JSON document to (empty = stdout)."""


@dataclass
class GencovConfig:
    """Complete gencov configuration from ``.gencov.yml``."""

    project: ProjectConfig
    """Project configuration."""

    reports: ReportsConfig = field(default_factory=ReportsConfig)
    """Reports to import."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Output configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _parse_reports_config(raw: dict[str, Any]) -> ReportsConfig:
    """Parse the reports section, falling back to environment variables."""
    reports_raw = _section(raw, "reports")
    reports = ReportsConfig()
    for mode, (key, env_var) in _REPORT_KEYS.items():
        reports.set_paths(mode, split_paths(reports_raw.get(key, os.environ.get(env_var))))

    deprecated = str(reports_raw.get(_DEPRECATED_REPORT_PATH_KEY, "") or "").strip()
    if deprecated:
        logger.warning(
            "reports.%s is deprecated, list the report under reports.coverage instead",
            _DEPRECATED_REPORT_PATH_KEY,
        )
        if deprecated not in reports.coverage:
            reports.coverage.append(deprecated)
    return reports


def _parse_output_config(raw: dict[str, Any]) -> OutputConfig:
    """Parse the output section."""
    output_raw = _section(raw, "output")
    return OutputConfig(
        format=str(output_raw.get("format", "terminal")),
        json_path=str(output_raw.get("json_path", "") or ""),
    )


def load_config(root: str | Path) -> GencovConfig:
    """Load and parse the complete ``.gencov.yml`` configuration.

    Falls back to defaults and environment variables when the YAML file is
    missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)

    project_raw = _section(raw, "project")
    base_dir = Path(str(project_raw.get("base_dir", os.environ.get("GENCOV_BASE_DIR", "."))))
    if not base_dir.is_absolute():
        base_dir = root_path / base_dir

    return GencovConfig(
        project=ProjectConfig(base_dir=str(base_dir.resolve())),
        reports=_parse_reports_config(raw),
        output=_parse_output_config(raw),
        raw=raw,
    )


def validate_config(config: GencovConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if not Path(config.project.base_dir).is_dir():
        errors.append(f"project.base_dir is not a directory (got: {config.project.base_dir})")

    if config.output.format not in _OUTPUT_FORMATS:
        errors.append(
            f"output.format must be one of: {', '.join(_OUTPUT_FORMATS)} "
            f"(got: {config.output.format})"
        )

    for mode, (key, _) in _REPORT_KEYS.items():
        paths = config.reports.paths_for(mode)
        duplicates = sorted({path for path in paths if paths.count(path) > 1})
        if duplicates:
            errors.append(
                f"reports.{key} lists the same report more than once: {', '.join(duplicates)}"
            )

    return errors
