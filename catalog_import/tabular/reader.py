from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.row_data import Cell, RawRow
from .columns import COLUMNS, EXPECTED_COLUMN_COUNT
from .detector import DecodedPayload
from .errors import EmptyFileError, NoDataError, RowIssue, SchemaMismatchError, StructuralParseError

"""Header validation and row parsing for delimited catalog payloads.

Order of checks:
1. validate_header: at least header + one data line, header has the expected
   number of fields on the detected delimiter (cheap, before any row parsing)
2. parse_rows: quote-aware tokenisation, trimming, tagged cells; every
   column-shifted record is collected and reported in one StructuralParseError
   up to the first broken quote, which stops tokenisation
"""

__all__ = [
    "SheetData",
    "validate_header",
    "parse_rows",
    "read_payload",
]

logger = logging.getLogger(__name__)


@dataclass
class SheetData:
    columns: list[str]
    rows: list[RawRow]  # data rows only, blank lines removed


def _has_content(line: str, delimiter: str) -> bool:
    return line.replace(delimiter, "").replace('"', "").strip() != ""


def validate_header(text: str, delimiter: str, expected_columns: int = EXPECTED_COLUMN_COUNT) -> list[str]:
    """Check the header line against the fixed column contract.

    Returns:
        Header field names (trimmed)

    Raises:
        EmptyFileError: fewer than two non-blank lines
        SchemaMismatchError: header field count differs from expected_columns
    """
    lines = [line for line in text.splitlines() if _has_content(line, delimiter)]
    if len(lines) < 2:
        raise EmptyFileError()
    names = [n.strip().strip('"').strip() for n in lines[0].split(delimiter)]
    if len(names) != expected_columns:
        raise SchemaMismatchError(expected_columns, len(names), delimiter)
    unknown = [n for n in names if n not in COLUMNS]
    if unknown:
        logger.warning("header has unknown columns %s (expected %s)", unknown, list(COLUMNS))
    return names


def parse_rows(
    text: str,
    delimiter: str,
    has_header: bool = True,
    columns: Sequence[str] = COLUMNS,
) -> SheetData:
    """Tokenise a delimited payload into RawRow records.

    Parameters
    ----------
    text: delimited payload
    delimiter: field separator (from detect_format)
    has_header: first non-blank record is the header; when False, ``columns``
        names the fields
    columns: column names used when has_header is False

    Raises:
        StructuralParseError: one or more records do not have the header's
            field count, or the quoting is broken
        NoDataError: no data row survived
    """
    reader = csv.reader(
        io.StringIO(text, newline=""),
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
        strict=True,
    )
    header: list[str] | None = None if has_header else [c.strip() for c in columns]
    rows: list[RawRow] = []
    issues: list[RowIssue] = []
    record_number = 0
    try:
        for fields in reader:
            record_number += 1
            if all(not f.strip() for f in fields):
                continue
            if header is None:
                header = [f.strip() for f in fields]
                continue
            if len(fields) != len(header):
                issues.append(RowIssue(record_number, len(header), len(fields)))
                continue
            values = {name: Cell.from_text(value) for name, value in zip(header, fields, strict=True)}
            rows.append(RawRow(row_number=record_number, values=values))
    except csv.Error as e:
        issues.append(
            RowIssue(record_number + 1, len(header or ()), 0, detail=f"unreadable record ({e}); later rows were not checked")
        )

    if issues:
        raise StructuralParseError(issues)
    if not rows:
        raise NoDataError()
    logger.debug("parsed %d data rows", len(rows))
    return SheetData(columns=header or [], rows=rows)


def read_payload(payload: DecodedPayload, expected_columns: int = EXPECTED_COLUMN_COUNT) -> SheetData:
    """validate_header then parse_rows on a decoded payload."""
    validate_header(payload.text, payload.delimiter, expected_columns)
    return parse_rows(payload.text, payload.delimiter)
