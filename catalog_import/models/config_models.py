from __future__ import annotations

from dataclasses import dataclass, field

from .distribution import WarehouseShare

"""Config dataclasses for the catalog import tool.

These are filled by ``catalog_import.config.loader.load_config`` after the
YAML file has passed schema validation; defaults here mirror the defaults
the loader applies.
"""

COMMIT_PARTIAL = "partial"
COMMIT_ALL_OR_NOTHING = "all_or_nothing"

ROUND_HALF_UP = "half_up"
ROUND_HALF_EVEN = "half_even"


@dataclass(frozen=True)
class CatalogSettings:
    """How rows are turned into products and when a batch is committed."""
    default_category: str = "Default"  # used when CATEGORY is blank
    variant_separator: str = "-"  # separator between key:value pairs in VARIANTNAME
    commit_policy: str = COMMIT_PARTIAL  # partial | all_or_nothing


@dataclass(frozen=True)
class DistributionSettings:
    rounding: str = ROUND_HALF_UP  # half_up | half_even
    concurrency: int = 4  # max in-flight apply_stock calls


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object."""
    output_directory: str  # where JsonFileBackend writes payloads
    catalog: CatalogSettings = field(default_factory=CatalogSettings)
    distribution: DistributionSettings = field(default_factory=DistributionSettings)
    warehouses: tuple[WarehouseShare, ...] = field(default_factory=tuple)
