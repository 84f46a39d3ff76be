"""Shared fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def make_files(root: Path, rel_paths: list[str]) -> None:
    """Create empty files (with parent directories) under *root*."""
    for rel in rel_paths:
        f = root / rel
        f.parent.mkdir(parents=True, exist_ok=True)
        f.touch()


def write_file(root: Path, rel: str, content: str) -> None:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


def write_yaml(root: Path, rel: str, data: dict[str, Any]) -> None:
    """Write a YAML file under *root*."""
    write_file(root, rel, yaml.safe_dump(data, sort_keys=False))


# ── Report samples ───────────────────────────────────────────────

_UNIT_COVERAGE = """\
<coverage version="1">
  <file path="src/calc.py">
    <lineToCover lineNumber="1" covered="true"/>
    <lineToCover lineNumber="2" covered="false"/>
    <lineToCover lineNumber="4" covered="true" branchesToCover="2" coveredBranches="1"/>
  </file>
  <file path="src/removed.py">
    <lineToCover lineNumber="1" covered="true"/>
  </file>
</coverage>
"""

# Second coverage run of the same sources: line 2 becomes covered
_MORE_COVERAGE = """\
<coverage version="1">
  <file path="src/calc.py">
    <lineToCover lineNumber="2" covered="true"/>
    <lineToCover lineNumber="4" covered="true" branchesToCover="2" coveredBranches="2"/>
  </file>
  <file path="src/util.py">
    <lineToCover lineNumber="3" covered="false"/>
  </file>
</coverage>
"""

_IT_COVERAGE = """\
<coverage version="1">
  <file path="src/util.py">
    <lineToCover lineNumber="3" covered="true"/>
  </file>
</coverage>
"""

_UNIT_TESTS = """\
<unitTest version="1">
  <file path="tests/test_calc.py">
    <testCase name="test_add" duration="5"/>
    <testCase name="test_sub" duration="7">
      <failure message="expected 2">AssertionError: 1 != 2</failure>
    </testCase>
    <testCase name="test_div" duration="0"><skipped message="slow"/></testCase>
    <testCase name="test_mul" duration="3"><error message="boom"/></testCase>
  </file>
</unitTest>
"""


# ── Project scaffolding fixtures ─────────────────────────────────


@pytest.fixture()
def reports_project(tmp_path: Path) -> Path:
    """Create a project with sources, report files and a ``.gencov.yml``."""
    make_files(tmp_path, ["src/calc.py", "src/util.py", "tests/test_calc.py"])
    write_file(tmp_path, "build/coverage.xml", _UNIT_COVERAGE)
    write_file(tmp_path, "build/coverage-more.xml", _MORE_COVERAGE)
    write_file(tmp_path, "build/it-coverage.xml", _IT_COVERAGE)
    write_file(tmp_path, "build/tests.xml", _UNIT_TESTS)
    write_yaml(
        tmp_path,
        ".gencov.yml",
        {
            "reports": {
                "coverage": ["build/coverage.xml", "build/coverage-more.xml"],
                "it_coverage": "build/it-coverage.xml",
                "unit_test": ["build/tests.xml"],
            },
        },
    )
    return tmp_path
