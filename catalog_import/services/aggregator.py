from __future__ import annotations

from collections.abc import Iterable

from ..models.catalog import Product
from ..models.import_result import ImportResult, RowError

"""Aggregation of per-group outcomes into one ImportResult.

A failing group never discards the products that were built successfully;
whether a partial batch may be committed is decided later by submit_import.
"""


def aggregate(outcomes: Iterable[Product | RowError], skipped_rows: Iterable[int] = ()) -> ImportResult:
    products: list[Product] = []
    errors: list[RowError] = []
    for outcome in outcomes:
        if isinstance(outcome, RowError):
            errors.append(outcome)
        else:
            products.append(outcome)
    return ImportResult(
        products=tuple(products),
        errors=tuple(errors),
        product_count=len(products),
        variant_count=sum(p.variant_count for p in products),
        skipped_rows=tuple(skipped_rows),
    )
