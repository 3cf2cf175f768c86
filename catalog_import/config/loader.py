from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import CatalogSettings, DistributionSettings, ImportConfig
from ..models.distribution import WarehouseShare
from ..services.distribution import InvalidPercentageError, validate_percentage

"""Config loader.

Responsibilities:
- Load the YAML config (default config/import.yml, or $CATALOG_IMPORT_CONFIG)
- Validate it against the bundled JSON schema
- Apply defaults (see models.config_models)
- Check warehouse percentages at this edit boundary (0..100)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")
CONFIG_ENV_VAR = "CATALOG_IMPORT_CONFIG"


class ConfigError(Exception):
    pass


def resolve_config_path(explicit: str | Path | None = None) -> Path:
    """--config wins, then $CATALOG_IMPORT_CONFIG, then config/import.yml."""
    if explicit:
        return Path(explicit)
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or config does not match it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _load_warehouses(raw: list[dict[str, Any]]) -> tuple[WarehouseShare, ...]:
    shares = []
    seen: set[Any] = set()
    for item in raw:
        wid = item["id"]
        if wid in seen:
            raise ConfigError(f"duplicate warehouse id: {wid}")
        seen.add(wid)
        try:
            pct = validate_percentage(item["percentage"])
        except InvalidPercentageError as e:
            raise ConfigError(f"warehouse {wid}: {e}") from e
        shares.append(WarehouseShare(warehouse_id=wid, percentage=pct, name=item.get("name", "")))
    return tuple(shares)


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    catalog_raw = data.get("catalog", {})
    dist_raw = data.get("distribution", {})
    defaults_catalog = CatalogSettings()
    defaults_dist = DistributionSettings()
    return ImportConfig(
        output_directory=data["output_directory"],
        catalog=CatalogSettings(
            default_category=catalog_raw.get("default_category", defaults_catalog.default_category),
            variant_separator=catalog_raw.get("variant_separator", defaults_catalog.variant_separator),
            commit_policy=catalog_raw.get("commit_policy", defaults_catalog.commit_policy),
        ),
        distribution=DistributionSettings(
            rounding=dist_raw.get("rounding", defaults_dist.rounding),
            concurrency=dist_raw.get("concurrency", defaults_dist.concurrency),
        ),
        warehouses=_load_warehouses(data.get("warehouses", [])),
    )
