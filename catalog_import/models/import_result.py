from __future__ import annotations

from dataclasses import dataclass, field

from .catalog import Product

"""Import result models.

RowError is one failed product group; ImportResult is the immutable outcome
of one import invocation, including partial successes.
"""

__all__ = [
    "RowError",
    "ImportResult",
]


@dataclass(frozen=True)
class RowError:
    """Per-group import failure.

    Attributes:
        row_number: First source row of the failing group (header = row 1)
        code: Product reference code of the group, "" when the row had none
        message: Human-readable reason
        error_type: Classification in UPPER_SNAKE_CASE (e.g. MISSING_FIELD)
    """
    row_number: int
    code: str
    message: str
    error_type: str = "RECORD_BUILD_ERROR"

    def __str__(self) -> str:
        ref = f" [{self.code}]" if self.code else ""
        return f"row {self.row_number}{ref}: {self.message}"


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import: successful products, per-group errors, counters."""
    products: tuple[Product, ...]
    errors: tuple[RowError, ...]
    product_count: int
    variant_count: int
    skipped_rows: tuple[int, ...] = field(default_factory=tuple)  # rows with no reference and no name

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
