"""Exceptions raised while importing generic coverage and unit-test reports.

Every error aborts the import of the report mode it was raised in. Errors
that stem from a specific record carry the 1-based line of that record in
the report; the importer adds the report path before re-raising so that the
author of the report can locate the offending element.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base exception for report import failures."""

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        report_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.report_path = report_path
        self.mode_label: str | None = None

    def locate(self, report_path: str, mode_label: str | None = None) -> None:
        """Attach the report path (and mode label) the error was raised for."""
        self.report_path = report_path
        if mode_label is not None:
            self.mode_label = mode_label

    def __str__(self) -> str:
        report = f"{self.mode_label} report" if self.mode_label else "report"
        if self.report_path and self.line_number is not None:
            return (
                f"Error at line {self.line_number} of {report} {self.report_path}: "
                f"{self.message}"
            )
        if self.report_path:
            return f"Error in {report} {self.report_path}: {self.message}"
        if self.line_number is not None:
            return f"Error at line {self.line_number}: {self.message}"
        return self.message


class SourceNotFoundError(ReportError):
    """Raised when a report file to import does not exist."""


class MalformedDocumentError(ReportError):
    """Raised when a report is not well-formed XML.

    ``line_number`` is the position reported by the XML parser, if any.
    """


class ReportParsingError(ReportError):
    """Raised for a record that breaks the report grammar or value rules."""


class StructuralViolationError(ReportParsingError):
    """Unexpected element, missing mandatory attribute or unsupported version."""


class ValueRangeError(ReportParsingError):
    """Attribute value that is not numeric/boolean or out of its allowed range."""


class MergeConflictError(ReportParsingError):
    """A record contradicts data already recorded for the same file."""


class BranchCountMismatchError(MergeConflictError):
    """The same line was reported with two different branch counts."""


class DuplicateTestError(MergeConflictError):
    """The same test name was reported twice for one file."""
