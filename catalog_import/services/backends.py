from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from ..models.catalog import Product
from ..models.distribution import Allocation, WarehouseId

"""Persistence collaborators.

The import pipeline and the stock distributor never talk to a store directly:
they hand a product batch to ``submit_products`` and each allocation to
``apply_stock``. Transport and credentials belong to the implementation.

- JsonFileBackend: writes the outbound payloads to files (CLI default)
- InMemoryBackend: keeps everything in memory, stock is additive
"""

__all__ = [
    "BackendError",
    "CatalogBackend",
    "product_payload",
    "JsonFileBackend",
    "InMemoryBackend",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class BackendError(Exception):
    pass


class CatalogBackend(Protocol):
    def submit_products(self, batch: Sequence[Product]) -> None: ...

    async def apply_stock(self, allocation: Allocation) -> None: ...


def product_payload(product: Product) -> dict[str, Any]:
    """JSON-ready representation of a product in the outbound batch format."""
    data: dict[str, Any] = {
        "code": product.code,
        "designation": product.designation,
        "category_name": product.category_name,
        "brand": product.brand,
        "description": product.description,
        "cost_price": product.cost_price,
        "prixHT": product.price_excl_tax,
        "taxe": product.tax_rate,
        "prixTTC": product.price_incl_tax,
        "sellable": product.sellable,
        "has_variants": product.has_variants,
        "image": product.image,
        "variants": [
            {
                "combination_name": v.combination_name,
                "price_impact": v.price_impact,
                "price": v.price,
                "stock": v.stock,
                "default_variant": v.is_default,
                "attributes": dict(v.attributes),
                "image": v.image,
            }
            for v in product.variants
        ],
    }
    if not product.has_variants:
        data["stock"] = product.stock
    return data


class JsonFileBackend:
    """Writes product batches as JSON and allocation requests as JSON Lines.

    Allocations are buffered by apply_stock and written by flush(), like the
    error log buffer.
    """

    def __init__(self, output_dir: Path | str) -> None:
        self.output_dir = Path(output_dir)
        self._stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
        self._allocations: list[Allocation] = []
        self.last_batch_path: Path | None = None

    def submit_products(self, batch: Sequence[Product]) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        fp = self.output_dir / f"products-{self._stamp}.json"
        payload = {"products": [product_payload(p) for p in batch]}
        fp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        self.last_batch_path = fp

    async def apply_stock(self, allocation: Allocation) -> None:
        self._allocations.append(allocation)

    def flush(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        fp = self.output_dir / f"allocations-{self._stamp}.jsonl"
        with fp.open("a", encoding="utf-8") as f:
            for a in self._allocations:
                line = {"product_id": a.product_id, "warehouse_id": a.warehouse_id, "quantity": a.quantity}
                f.write(json.dumps(line, ensure_ascii=False) + "\n")
        self._allocations.clear()
        return fp


class InMemoryBackend:
    """In-memory collaborator with add-stock semantics.

    ``fail_pairs`` holds (product_id, warehouse_id) pairs whose apply_stock
    call raises BackendError.
    """

    def __init__(self, fail_pairs: set[tuple[Any, WarehouseId]] | None = None) -> None:
        self.batches: list[tuple[Product, ...]] = []
        self.stock: dict[tuple[WarehouseId, Any], int] = {}
        self.fail_pairs = set(fail_pairs or ())
        self.calls = 0

    def submit_products(self, batch: Sequence[Product]) -> None:
        self.batches.append(tuple(batch))

    async def apply_stock(self, allocation: Allocation) -> None:
        self.calls += 1
        await asyncio.sleep(0)
        if (allocation.product_id, allocation.warehouse_id) in self.fail_pairs:
            raise BackendError(
                f"add-stock rejected for product {allocation.product_id} "
                f"in warehouse {allocation.warehouse_id}"
            )
        key = (allocation.warehouse_id, allocation.product_id)
        self.stock[key] = self.stock.get(key, 0) + allocation.quantity

    def quantity(self, warehouse_id: WarehouseId, product_id: Any) -> int:
        return self.stock.get((warehouse_id, product_id), 0)
