"""Streaming reader and grammar validation for generic reports."""

from gencov.parsing.errors import (
    BranchCountMismatchError,
    DuplicateTestError,
    MalformedDocumentError,
    MergeConflictError,
    ReportError,
    ReportParsingError,
    SourceNotFoundError,
    StructuralViolationError,
    ValueRangeError,
)
from gencov.parsing.reader import Element, ReportReader
from gencov.parsing.report_parser import (
    CaseRecord,
    FileBlock,
    LineToCoverRecord,
    ReportParser,
)

__all__ = [
    "BranchCountMismatchError",
    "CaseRecord",
    "DuplicateTestError",
    "Element",
    "FileBlock",
    "LineToCoverRecord",
    "MalformedDocumentError",
    "MergeConflictError",
    "ReportError",
    "ReportParser",
    "ReportParsingError",
    "ReportReader",
    "SourceNotFoundError",
    "StructuralViolationError",
    "ValueRangeError",
]
