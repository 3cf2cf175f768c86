from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation

from ..models.config_models import ROUND_HALF_EVEN as POLICY_HALF_EVEN
from ..models.config_models import ROUND_HALF_UP as POLICY_HALF_UP
from ..models.distribution import (
    Allocation,
    AllocationFailure,
    DistributionPlan,
    DistributionReport,
    ProductStock,
    WarehouseId,
    WarehouseShare,
)
from .backends import CatalogBackend

"""Percentage-based stock distribution across warehouses.

quantity = round(total_stock * percentage / 100) for each warehouse, computed
on decimals with a configurable rounding policy:

    half_up   (default)  2.5 -> 3
    half_even            2.5 -> 2

The allocations are advisory: they are not a partition of the total (rounding
drift, shares not summing to 100) and the backend adds stock, so applying the
same plan twice doubles the quantities. Resetting warehouse stock before a
re-run is up to the caller.
"""

__all__ = [
    "InvalidPercentageError",
    "validate_percentage",
    "allocate",
    "build_plan",
    "apply_plan",
    "distribute",
]

logger = logging.getLogger(__name__)

_ROUNDING = {
    POLICY_HALF_UP: ROUND_HALF_UP,
    POLICY_HALF_EVEN: ROUND_HALF_EVEN,
}


class InvalidPercentageError(ValueError):
    pass


def validate_percentage(value: object) -> float:
    """Edit-boundary check for a warehouse percentage (0 to 100 inclusive)."""
    if isinstance(value, bool):
        raise InvalidPercentageError(f"invalid percentage: {value!r}")
    try:
        if isinstance(value, str):
            pct = float(value.strip().replace(",", "."))
        else:
            pct = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidPercentageError(f"invalid percentage: {value!r}") from None
    if not 0 <= pct <= 100:
        raise InvalidPercentageError(f"percentage must be between 0 and 100, got {pct:g}")
    return pct


def _rounding_mode(policy: str) -> str:
    try:
        return _ROUNDING[policy]
    except KeyError:
        raise ValueError(f"unknown rounding policy: {policy!r}") from None


def allocate(
    total_stock: int | None,
    shares: Sequence[WarehouseShare],
    rounding: str = POLICY_HALF_UP,
) -> dict[WarehouseId, int]:
    """Quantity per warehouse for one product; empty when there is no stock."""
    mode = _rounding_mode(rounding)
    if not total_stock or total_stock <= 0:
        return {}
    total = Decimal(total_stock)
    result: dict[WarehouseId, int] = {}
    for share in shares:
        try:
            exact = total * Decimal(str(share.percentage)) / 100
        except InvalidOperation as e:
            raise InvalidPercentageError(f"invalid percentage for warehouse {share.warehouse_id}") from e
        result[share.warehouse_id] = int(exact.quantize(Decimal(1), rounding=mode))
    return result


def build_plan(
    products: Iterable[ProductStock],
    shares: Sequence[WarehouseShare],
    rounding: str = POLICY_HALF_UP,
) -> DistributionPlan:
    """One allocation per (product, warehouse) pair for products with stock."""
    allocations: list[Allocation] = []
    for product in products:
        quantities = allocate(product.stock, shares, rounding)
        if not quantities:
            logger.debug("product %s has no stock, skipped", product.product_id)
            continue
        for warehouse_id, quantity in quantities.items():
            allocations.append(Allocation(product.product_id, warehouse_id, quantity))
    return DistributionPlan(allocations=tuple(allocations))


async def apply_plan(
    plan: DistributionPlan,
    backend: CatalogBackend,
    concurrency: int = 4,
) -> DistributionReport:
    """Send every allocation to the backend, at most ``concurrency`` at a time.

    A failing allocation is logged and reported; it does not stop or undo the
    others. Cancelling the task stops the calls not yet issued.
    """
    sem = asyncio.Semaphore(max(1, concurrency))

    async def _apply(allocation: Allocation) -> AllocationFailure | None:
        async with sem:
            try:
                await backend.apply_stock(allocation)
            except Exception as e:
                logger.error(
                    "failed to add stock for product %s to warehouse %s: %s",
                    allocation.product_id,
                    allocation.warehouse_id,
                    e,
                )
                return AllocationFailure(allocation=allocation, message=str(e))
        return None

    outcomes = await asyncio.gather(*(_apply(a) for a in plan.allocations))
    failures = tuple(f for f in outcomes if f is not None)
    applied = tuple(a for a, f in zip(plan.allocations, outcomes, strict=True) if f is None)
    return DistributionReport(applied=applied, failures=failures)


def distribute(
    products: Iterable[ProductStock],
    shares: Sequence[WarehouseShare],
    backend: CatalogBackend,
    *,
    rounding: str = POLICY_HALF_UP,
    concurrency: int = 4,
) -> tuple[DistributionPlan, DistributionReport]:
    """Build the plan and apply it synchronously (for CLI use)."""
    plan = build_plan(products, shares, rounding)
    report = asyncio.run(apply_plan(plan, backend, concurrency))
    return plan, report
