from __future__ import annotations

from dataclasses import dataclass

"""Batch-fatal errors raised before any product is built.

Each of them rejects the whole file. The message is meant to be shown to the
operator as-is: what was expected, what was found, and how to fix the file.
"""

__all__ = [
    "FileRejectedError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "SchemaMismatchError",
    "StructuralParseError",
    "RowIssue",
    "NoDataError",
]

_FORMAT_HINTS = (
    "Hints:\n"
    "1. Check that every line has the same number of columns\n"
    '2. Wrap values containing commas or tabs in double quotes ("value")\n'
    "3. Use the provided template as a reference"
)


def delimiter_label(delimiter: str) -> str:
    return "tab" if delimiter == "\t" else "comma" if delimiter == "," else repr(delimiter)


class FileRejectedError(Exception):
    """Base class: the file cannot be imported at all."""
    error_type = "FILE_REJECTED"


class UnsupportedFormatError(FileRejectedError):
    error_type = "UNSUPPORTED_FORMAT"

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        super().__init__(
            f"unsupported file '{file_name}': only CSV (.csv, .tsv, .txt) "
            "or Excel (.xlsx, .xlsm, .xls) files are accepted"
        )


class EmptyFileError(FileRejectedError):
    error_type = "EMPTY_FILE"

    def __init__(self) -> None:
        super().__init__("the file must contain a header line and at least one data line")


class SchemaMismatchError(FileRejectedError):
    error_type = "SCHEMA_MISMATCH"

    def __init__(self, expected: int, found: int, delimiter: str) -> None:
        self.expected = expected
        self.found = found
        self.delimiter = delimiter
        super().__init__(
            f"the header must contain {expected} columns, {found} found.\n"
            f"Detected delimiter: {delimiter_label(delimiter)}\n"
            'Make sure every value containing a comma or a tab is quoted ("value")'
        )


@dataclass(frozen=True)
class RowIssue:
    row_number: int
    expected: int
    found: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"row {self.row_number}: {self.detail}"
        kind = "too few fields" if self.found < self.expected else "too many fields"
        return f"row {self.row_number}: {kind} ({self.expected} expected, {self.found} found)"


class StructuralParseError(FileRejectedError):
    """Column-shifted rows: reported once for the whole file, before grouping."""
    error_type = "STRUCTURAL_PARSE_ERROR"

    def __init__(self, issues: list[RowIssue]) -> None:
        self.issues = list(issues)
        details = "\n".join(str(i) for i in self.issues)
        super().__init__(f"format problem detected:\n{details}\n\n{_FORMAT_HINTS}")


class NoDataError(FileRejectedError):
    error_type = "NO_DATA"

    def __init__(self) -> None:
        super().__init__("no valid data row found in the file")
