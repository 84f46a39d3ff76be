"""Grammar validation of generic coverage and unit-test reports.

Two document grammars are accepted, selected by the report mode::

    coverage[version] > file[path]* > lineToCover[lineNumber, covered,
                                                  branchesToCover?, coveredBranches?]*
    unitTest[version] > file[path]* > testCase[name, duration] >
                                      (failure|error|skipped)[message]?

``ReportParser.files`` walks a report and yields one ``FileBlock`` per
``file`` element. The records of a block are only read, and validated, when
the caller iterates ``FileBlock.records``; a block that is left unread is
skipped. Every violation raises a ``ReportParsingError`` subclass tagged with
the line of the offending element.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gencov.models.test_result import CaseStatus
from gencov.parsing.errors import StructuralViolationError, ValueRangeError
from gencov.parsing.reader import Element, ReportReader

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import BinaryIO

    from gencov.models.modes import ReportMode

SUPPORTED_VERSION = "1"

_FILE = "file"
_PATH_ATTR = "path"
_LINE_TO_COVER = "lineToCover"
_LINE_NUMBER_ATTR = "lineNumber"
_COVERED_ATTR = "covered"
_BRANCHES_TO_COVER_ATTR = "branchesToCover"
_COVERED_BRANCHES_ATTR = "coveredBranches"
_TEST_CASE = "testCase"
_NAME_ATTR = "name"
_DURATION_ATTR = "duration"
_MESSAGE_ATTR = "message"

_OUTCOMES = {
    "failure": CaseStatus.FAILURE,
    "error": CaseStatus.ERROR,
    "skipped": CaseStatus.SKIPPED,
}

_INT_RE = re.compile(r"[+-]?[0-9]+")
_MAX_INT = 2**31 - 1


@dataclass(frozen=True)
class LineToCoverRecord:
    """A validated ``lineToCover`` element."""

    line_number: int
    covered: bool
    branches_to_cover: int | None
    covered_branches: int | None
    source_line: int
    """Line of the element in the report."""


@dataclass(frozen=True)
class CaseRecord:
    """A validated ``testCase`` element."""

    name: str
    status: CaseStatus
    duration: int
    message: str | None
    stack_trace: str | None
    source_line: int
    """Line of the element in the report."""


Record = LineToCoverRecord | CaseRecord


class FileBlock:
    """A ``file`` element whose child records can be read once."""

    def __init__(self, parser: ReportParser, reader: ReportReader, element: Element) -> None:
        self._parser = parser
        self._reader = reader
        self._element = element
        self.path: str = element.get(_PATH_ATTR) or ""
        self.line: int = element.line

    def records(self) -> Iterator[Record]:
        """Yield the validated child records of this file, in document order."""
        for child in self._reader.children(self._element):
            yield self._parser.parse_record(self._reader, child)


class ReportParser:
    """Validate reports of one mode and expose their content as records."""

    def __init__(self, mode: ReportMode) -> None:
        self.mode = mode

    def files(self, stream: BinaryIO) -> Iterator[FileBlock]:
        """Yield the ``file`` blocks of the report read from *stream*."""
        reader = ReportReader(stream)
        root = reader.root()
        if root is None:
            raise StructuralViolationError("Report has no root element", line_number=1)
        _check_element_name(root, self.mode.root_element)
        version = root.get("version")
        if version != SUPPORTED_VERSION:
            raise StructuralViolationError(
                f"Unknown report version: {version}. "
                f"This parser only handles version {SUPPORTED_VERSION}.",
                line_number=root.line,
            )
        for element in reader.children(root):
            _check_element_name(element, _FILE)
            if not _mandatory_attribute(element, _PATH_ATTR):
                raise StructuralViolationError(
                    f'Attribute "{_PATH_ATTR}" of element "{_FILE}" must not be empty',
                    line_number=element.line,
                )
            yield FileBlock(self, reader, element)

    def parse_record(self, reader: ReportReader, element: Element) -> Record:
        """Validate one child of a ``file`` element."""
        if self.mode.is_coverage:
            return _parse_line_to_cover(element)
        return _parse_test_case(reader, element)


def _parse_line_to_cover(element: Element) -> LineToCoverRecord:
    _check_element_name(element, _LINE_TO_COVER)
    line_number = _int_attr(element, _LINE_NUMBER_ATTR, minimum=1)

    covered_value = _mandatory_attribute(element, _COVERED_ATTR)
    if covered_value.lower() not in {"true", "false"}:
        raise ValueRangeError(
            _expected_message("boolean value", _COVERED_ATTR, covered_value),
            line_number=element.line,
        )

    branches_to_cover = _optional_int_attr(element, _BRANCHES_TO_COVER_ATTR, minimum=0)
    covered_branches = _optional_int_attr(element, _COVERED_BRANCHES_ATTR, minimum=0)
    if (
        branches_to_cover is not None
        and covered_branches is not None
        and covered_branches > branches_to_cover
    ):
        raise ValueRangeError(
            f'"{_COVERED_BRANCHES_ATTR}" should not be greater than "{_BRANCHES_TO_COVER_ATTR}"',
            line_number=element.line,
        )

    return LineToCoverRecord(
        line_number=line_number,
        covered=covered_value.lower() == "true",
        branches_to_cover=branches_to_cover,
        covered_branches=covered_branches,
        source_line=element.line,
    )


def _parse_test_case(reader: ReportReader, element: Element) -> CaseRecord:
    _check_element_name(element, _TEST_CASE)
    name = _mandatory_attribute(element, _NAME_ATTR)
    if not name:
        raise StructuralViolationError(
            f'Attribute "{_NAME_ATTR}" of element "{_TEST_CASE}" must not be empty',
            line_number=element.line,
        )
    duration = _int_attr(element, _DURATION_ATTR, minimum=0)

    status = CaseStatus.OK
    message: str | None = None
    stack_trace: str | None = None
    seen_outcome = False
    for child in reader.children(element):
        if seen_outcome:
            raise StructuralViolationError(
                f'Element "{_TEST_CASE}" must contain at most one of '
                f'"failure", "error" or "skipped" but got another "{child.name}"',
                line_number=child.line,
            )
        if child.name not in _OUTCOMES:
            raise StructuralViolationError(
                f'Unknown XML node, expected "failure", "error" or "skipped" '
                f'but got "{child.name}"',
                line_number=child.line,
            )
        seen_outcome = True
        status = _OUTCOMES[child.name]
        message = _mandatory_attribute(child, _MESSAGE_ATTR)
        stack_trace = reader.text(child)

    return CaseRecord(
        name=name,
        status=status,
        duration=duration,
        message=message,
        stack_trace=stack_trace,
        source_line=element.line,
    )


def _check_element_name(element: Element, expected: str) -> None:
    if element.name != expected:
        raise StructuralViolationError(
            f'Unknown XML node, expected "{expected}" but got "{element.name}"',
            line_number=element.line,
        )


def _mandatory_attribute(element: Element, key: str) -> str:
    value = element.get(key)
    if value is None:
        raise StructuralViolationError(
            f'Missing attribute "{key}" in element "{element.name}"',
            line_number=element.line,
        )
    return value


def _int_attr(element: Element, key: str, *, minimum: int) -> int:
    return _to_int(element, key, _mandatory_attribute(element, key), minimum)


def _optional_int_attr(element: Element, key: str, *, minimum: int) -> int | None:
    value = element.get(key)
    if value is None:
        return None
    return _to_int(element, key, value, minimum)


def _to_int(element: Element, key: str, value: str, minimum: int) -> int:
    if not _INT_RE.fullmatch(value) or int(value) > _MAX_INT:
        raise ValueRangeError(
            _expected_message("integer value", key, value), line_number=element.line
        )
    number = int(value)
    if number < minimum:
        raise ValueRangeError(
            f'Value of attribute "{key}" is "{number}" but it should be greater than '
            f"or equal to {minimum}",
            line_number=element.line,
        )
    return number


def _expected_message(expected: str, key: str, value: str) -> str:
    return f'Expected {expected} for attribute "{key}" but got "{value}"'
