from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

"""RawRow model for the catalog import tool.

A RawRow is one data record of the source file after tokenisation. Every cell
is kept as a tagged ``Cell`` so the original text survives next to the typed
value (reference codes such as ``00123`` must not turn into numbers), and the
accessors below hand strict ``str`` / ``bool`` values to the rest of the
pipeline.
"""

__all__ = [
    "Cell",
    "CellKind",
    "RawRow",
]

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class CellKind(Enum):
    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class Cell:
    """Tagged cell value produced by the row parser."""
    raw: str  # trimmed source text
    kind: CellKind
    value: str | float | bool | None

    @staticmethod
    def from_text(text: str) -> Cell:
        """Best-effort typing of a trimmed cell.

        ``TRUE``/``FALSE`` (any case) become booleans, decimal literals using
        a point become floats, blanks become EMPTY. Everything else is text.
        """
        raw = text.strip()
        if raw == "":
            return Cell(raw="", kind=CellKind.EMPTY, value=None)
        upper = raw.upper()
        if upper in ("TRUE", "FALSE"):
            return Cell(raw=raw, kind=CellKind.BOOLEAN, value=upper == "TRUE")
        if _NUMBER_RE.match(raw):
            return Cell(raw=raw, kind=CellKind.NUMBER, value=float(raw))
        return Cell(raw=raw, kind=CellKind.TEXT, value=raw)


@dataclass(frozen=True)
class RawRow:
    """One parsed data record.

    row_number is the 1-based record number in the source file, the header
    being row 1, so the first data record is row 2.
    """
    row_number: int
    values: dict[str, Cell]

    def text(self, column: str) -> str:
        """Trimmed source text of a column ("" when missing or blank)."""
        cell = self.values.get(column)
        return cell.raw if cell is not None else ""

    def flag(self, column: str) -> bool | None:
        """Boolean reading of a TRUE/FALSE column, None when blank."""
        cell = self.values.get(column)
        if cell is None or cell.kind is CellKind.EMPTY:
            return None
        if cell.kind is CellKind.BOOLEAN:
            return bool(cell.value)
        return cell.raw.upper() == "TRUE"
