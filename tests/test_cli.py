"""Tests for the gencov CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from click.testing import CliRunner

from gencov.cli import _config_to_dict, cli
from gencov.config import load_config

_COVERAGE_XML = """\
<coverage version="1">
  <file path="src/app.py">
    <lineToCover lineNumber="1" covered="true"/>
    <lineToCover lineNumber="2" covered="false"/>
  </file>
</coverage>
"""

_UNIT_TEST_XML = """\
<unitTest version="1">
  <file path="tests/test_app.py">
    <testCase name="test_ok" duration="10"/>
  </file>
</unitTest>
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "GENCOV_BASE_DIR",
        "GENCOV_COVERAGE_REPORT_PATHS",
        "GENCOV_IT_COVERAGE_REPORT_PATHS",
        "GENCOV_OVERALL_COVERAGE_REPORT_PATHS",
        "GENCOV_UNIT_TEST_REPORT_PATHS",
    ):
        monkeypatch.delenv(var, raising=False)


def _write_file(root: Path, rel: str, content: str) -> Path:
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def _write_gencov_yml(root: Path, data: dict[str, Any]) -> None:
    (root / ".gencov.yml").write_text(yaml.dump(data), encoding="utf-8")


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    _write_file(tmp_path, "src/app.py", "x = 1\n")
    _write_file(tmp_path, "tests/test_app.py", "def test_ok(): pass\n")
    _write_file(tmp_path, "build/coverage.xml", _COVERAGE_XML)
    _write_file(tmp_path, "build/unit.xml", _UNIT_TEST_XML)
    return tmp_path


def test_version() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "import" in result.output
    assert "config" in result.output


# ── import ───────────────────────────────────────────────────────


class TestImportCommand:
    def test_json_output_from_command_line_paths(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "import",
                "--path",
                str(project),
                "--coverage",
                "build/coverage.xml",
                "--unit-test",
                "build/unit.xml",
                "--json-output",
            ],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["completed"] is True
        assert data["modes"]["coverage"]["files"]["src/app.py"] == {
            "lines_to_cover": 2,
            "uncovered_lines": 1,
            "coverage_line_hits_data": "1=1;2=0",
        }
        assert data["modes"]["unit-test"]["files"]["tests/test_app.py"]["tests"] == 1

    def test_configured_reports(self, project: Path) -> None:
        _write_gencov_yml(project, {"reports": {"coverage": ["build/coverage.xml"]}})
        runner = CliRunner()
        result = runner.invoke(cli, ["import", "--path", str(project), "--json-output"])
        assert result.exit_code == 0, result.output
        assert list(json.loads(result.output)["modes"]) == ["coverage"]

    def test_command_line_replaces_configured_paths(self, project: Path) -> None:
        _write_gencov_yml(project, {"reports": {"coverage": ["build/missing.xml"]}})
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["import", "--path", str(project), "--coverage", "build/coverage.xml", "--json-output"],
        )
        assert result.exit_code == 0, result.output

    def test_terminal_output(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["import", "--path", str(project), "--coverage", "build/coverage.xml"]
        )
        assert result.exit_code == 0, result.output

    def test_output_file(self, project: Path) -> None:
        out = project / "out" / "report.json"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "import",
                "--path",
                str(project),
                "--it-coverage",
                "build/coverage.xml",
                "--output",
                str(out),
            ],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert "it_lines_to_cover" in data["modes"]["it-coverage"]["files"]["src/app.py"]

    def test_configured_json_format(self, project: Path) -> None:
        _write_gencov_yml(
            project,
            {
                "reports": {"overall_coverage": "build/coverage.xml"},
                "output": {"format": "json", "json_path": str(project / "gencov.json")},
            },
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["import", "--path", str(project)])
        assert result.exit_code == 0, result.output
        assert (project / "gencov.json").is_file()

    def test_nothing_configured(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["import", "--path", str(project)])
        assert result.exit_code == 0
        assert "No report configured" in result.output

    def test_missing_report_exits_non_zero(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "import",
                "--path",
                str(project),
                "--coverage",
                "build/coverage.xml",
                "--unit-test",
                "build/missing.xml",
            ],
        )
        assert result.exit_code != 0
        assert "cannot find report" in result.output

    def test_invalid_report_exits_non_zero(self, project: Path) -> None:
        _write_file(project, "build/bad.xml", '<coverage version="3"/>')
        runner = CliRunner()
        result = runner.invoke(
            cli, ["import", "--path", str(project), "--coverage", "build/bad.xml"]
        )
        assert result.exit_code != 0
        assert "Unknown report version: 3" in " ".join(result.output.split())

    def test_invalid_config_exits_non_zero(self, project: Path) -> None:
        _write_gencov_yml(project, {"output": {"format": "html"}})
        runner = CliRunner()
        result = runner.invoke(
            cli, ["import", "--path", str(project), "--coverage", "build/coverage.xml"]
        )
        assert result.exit_code != 0
        assert "output.format" in result.output

    def test_verbose_flag(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[bool] = []
        monkeypatch.setattr(
            "gencov.cli._configure_logging", lambda *, verbose: calls.append(verbose)
        )
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["--verbose", "import", "--path", str(project), "--coverage", "build/coverage.xml"],
        )
        assert result.exit_code == 0, result.output
        assert calls == [True]


# ── config ───────────────────────────────────────────────────────


class TestConfigCommands:
    def test_config_to_dict_drops_raw(self, project: Path) -> None:
        _write_gencov_yml(project, {"reports": {"coverage": ["a.xml"]}})
        data = _config_to_dict(load_config(project))
        assert "raw" not in data
        assert data["reports"]["coverage"] == ["a.xml"]

    def test_show_json(self, project: Path) -> None:
        _write_gencov_yml(project, {"reports": {"unit_test": "t.xml"}})
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "--path", str(project), "--json-output"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["reports"]["unit_test"] == ["t.xml"]
        assert data["output"]["format"] == "terminal"

    def test_show_yaml(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "--path", str(project)])
        assert result.exit_code == 0
        assert "base_dir:" in result.output

    def test_validate_valid(self, project: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", "--path", str(project)])
        assert result.exit_code == 0
        assert "Configuration is valid!" in result.output

    def test_validate_invalid(self, project: Path) -> None:
        _write_gencov_yml(
            project,
            {
                "project": {"base_dir": "nope"},
                "reports": {"coverage": ["a.xml", "a.xml"]},
            },
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", "--path", str(project)])
        assert result.exit_code != 0
        assert "Found 2 configuration error(s)" in result.output
