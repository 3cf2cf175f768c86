from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

import pandas as pd

from .errors import UnsupportedFormatError

"""Source format detection.

Spreadsheets are decoded with pandas (openpyxl for .xlsx/.xlsm, xlrd for .xls)
and their first sheet is re-emitted as comma-delimited text, so the rest of
the pipeline only ever sees delimited text. For text files the delimiter is
guessed from the first non-empty line.
"""

__all__ = [
    "DecodedPayload",
    "SPREADSHEET_EXTENSIONS",
    "TEXT_EXTENSIONS",
    "detect_delimiter",
    "detect_format",
    "sheet_to_text",
]

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = {".xlsx": "openpyxl", ".xlsm": "openpyxl", ".xls": "xlrd"}
TEXT_EXTENSIONS = {".csv", ".tsv", ".txt"}


@dataclass(frozen=True)
class DecodedPayload:
    text: str
    delimiter: str
    source_kind: str  # "spreadsheet" | "text"


def detect_delimiter(text: str) -> str:
    """Tab when the first non-empty line has strictly more tabs than commas, else comma."""
    for line in text.splitlines():
        if line.strip():
            return "\t" if line.count("\t") > line.count(",") else ","
    return ","


def _decode_text(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("file is not valid UTF-8, decoding as latin-1")
        return content.decode("latin-1")


def _cell_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def sheet_to_text(content: bytes, engine: str) -> str:
    """Decode the first sheet of a workbook into comma-delimited text."""
    xls = pd.ExcelFile(io.BytesIO(content), engine=engine)
    if not xls.sheet_names:
        return ""
    # keep_default_na=False: codes such as "NA" or "NULL" stay text
    df = xls.parse(xls.sheet_names[0], header=None, dtype=object, keep_default_na=False)
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=",", quotechar='"', lineterminator="\n")
    # blank rows are kept so row numbers still match the sheet
    for raw in df.itertuples(index=False, name=None):
        writer.writerow([_cell_text(v) for v in raw])
    return buf.getvalue()


def detect_format(file_name: str, content: bytes | str) -> DecodedPayload:
    """Decode a source file into delimited text plus its delimiter.

    Raises:
        UnsupportedFormatError: extension is neither a spreadsheet nor a text type
    """
    suffix = PurePath(file_name).suffix.lower()
    if suffix in SPREADSHEET_EXTENSIONS:
        if isinstance(content, str):
            raise UnsupportedFormatError(file_name)
        text = sheet_to_text(content, SPREADSHEET_EXTENSIONS[suffix])
        logger.debug("decoded spreadsheet %s (%d chars)", file_name, len(text))
        return DecodedPayload(text=text, delimiter=",", source_kind="spreadsheet")
    if suffix in TEXT_EXTENSIONS:
        text = content if isinstance(content, str) else _decode_text(content)
        delimiter = detect_delimiter(text)
        logger.debug("decoded text %s delimiter=%r", file_name, delimiter)
        return DecodedPayload(text=text, delimiter=delimiter, source_kind="text")
    raise UnsupportedFormatError(file_name)
