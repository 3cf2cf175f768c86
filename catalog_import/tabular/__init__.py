"""Reading catalog files: format detection, header validation, row parsing."""

from .columns import COLUMNS, EXPECTED_COLUMN_COUNT
from .detector import DecodedPayload, detect_delimiter, detect_format
from .errors import (
    EmptyFileError,
    FileRejectedError,
    NoDataError,
    SchemaMismatchError,
    StructuralParseError,
    UnsupportedFormatError,
)
from .reader import SheetData, parse_rows, read_payload, validate_header

__all__ = [
    "COLUMNS",
    "EXPECTED_COLUMN_COUNT",
    "DecodedPayload",
    "detect_delimiter",
    "detect_format",
    "SheetData",
    "parse_rows",
    "read_payload",
    "validate_header",
    "FileRejectedError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "SchemaMismatchError",
    "StructuralParseError",
    "NoDataError",
]
