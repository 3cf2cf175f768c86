from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models.row_data import RawRow
from ..tabular.columns import PRODUCTNAME, REFERENCE

"""Grouping of parsed rows into products.

All rows sharing a key (reference code, else product name) describe one
product, wherever they appear in the file. Keys keep first-seen order and rows
keep source order inside a group, so error messages and counters are
reproducible.
"""

__all__ = [
    "GroupedRows",
    "group_key",
    "group_rows",
]


@dataclass
class GroupedRows:
    groups: dict[str, list[RawRow]] = field(default_factory=dict)
    skipped_rows: list[int] = field(default_factory=list)  # rows without reference and name


def group_key(row: RawRow) -> str:
    return row.text(REFERENCE) or row.text(PRODUCTNAME)


def group_rows(rows: Iterable[RawRow]) -> GroupedRows:
    result = GroupedRows()
    for row in rows:
        key = group_key(row)
        if not key:
            result.skipped_rows.append(row.row_number)
            continue
        result.groups.setdefault(key, []).append(row)
    return result
