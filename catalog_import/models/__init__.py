"""Domain models for the catalog import tool.

This package contains the dataclasses shared by the tabular reader, the
import services and the stock distributor.
"""

from .catalog import Product, Variant
from .config_models import CatalogSettings, DistributionSettings, ImportConfig
from .distribution import (
    Allocation,
    AllocationFailure,
    DistributionPlan,
    DistributionReport,
    ProductStock,
    WarehouseShare,
)
from .error_record import ErrorRecord
from .import_result import ImportResult, RowError
from .row_data import Cell, CellKind, RawRow

__all__ = [
    # Configuration models
    "CatalogSettings",
    "DistributionSettings",
    "ImportConfig",
    # Import models
    "Cell",
    "CellKind",
    "RawRow",
    "Product",
    "Variant",
    "RowError",
    "ImportResult",
    "ErrorRecord",
    # Distribution models
    "WarehouseShare",
    "ProductStock",
    "Allocation",
    "AllocationFailure",
    "DistributionPlan",
    "DistributionReport",
]
