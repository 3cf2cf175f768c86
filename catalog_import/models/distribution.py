from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

"""Stock distribution models.

A DistributionPlan is ephemeral: it is built from the current catalog stock
and the warehouse shares, and consumed right away by the persistence
collaborator. DistributionReport tells which allocations went through.
"""

__all__ = [
    "WarehouseId",
    "WarehouseShare",
    "ProductStock",
    "Allocation",
    "AllocationFailure",
    "DistributionPlan",
    "DistributionReport",
]

WarehouseId = Union[int, str]


@dataclass(frozen=True)
class WarehouseShare:
    """Percentage of every product's stock that a warehouse receives.

    The percentage is checked to be within [0, 100] where it is edited
    (config loading), not here. Shares across warehouses need not sum to 100.
    """
    warehouse_id: WarehouseId
    percentage: float
    name: str = ""


@dataclass(frozen=True)
class ProductStock:
    product_id: int | str
    stock: int | None  # None when the catalog has no stock value


@dataclass(frozen=True)
class Allocation:
    product_id: int | str
    warehouse_id: WarehouseId
    quantity: int


@dataclass(frozen=True)
class AllocationFailure:
    allocation: Allocation
    message: str


@dataclass(frozen=True)
class DistributionPlan:
    allocations: tuple[Allocation, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.allocations)

    def __iter__(self):
        return iter(self.allocations)

    def total_quantity(self) -> int:
        return sum(a.quantity for a in self.allocations)


@dataclass(frozen=True)
class DistributionReport:
    applied: tuple[Allocation, ...]
    failures: tuple[AllocationFailure, ...]

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
