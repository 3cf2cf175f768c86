# Shared pytest fixtures
from __future__ import annotations

import csv
import io
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from catalog_import.logging.init import reset_logging
from catalog_import.tabular.columns import COLUMNS

SIMPLE_DEFAULTS = {
    "ACTION": "CREATE",
    "PRODUCTNAME": "Produit Simple",
    "REFERENCE": "PROD001",
    "CATEGORY": "Epicerie",
    "BRAND": "Marque",
    "DESCRIPTION": "Description",
    "COSTPRICE": "10.0",
    "SELLPRICETAXEXCLUDE": "15.0",
    "VAT": "20.0",
    "SELLPRICETAXINCLUDE": "18.0",
    "QUANTITY": "100",
    "SELLABLE": "TRUE",
    "SIMPLEPRODUCT": "TRUE",
}


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CATALOG_IMPORT_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
catalog:
  default_category: Divers
  variant_separator: "-"
  commit_policy: partial
distribution:
  rounding: half_up
  concurrency: 2
warehouses:
  - id: 1
    name: Paris
    percentage: 60
  - id: 2
    name: Lyon
    percentage: 40
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_row() -> Callable[..., list[str]]:
    """Build one 19-column row; keyword arguments override a simple product."""
    def _make(**fields: str) -> list[str]:
        values = {**SIMPLE_DEFAULTS, **fields}
        unknown = set(values) - set(COLUMNS)
        assert not unknown, f"unknown columns {unknown}"
        return [values.get(c, "") for c in COLUMNS]
    return _make


@pytest.fixture()
def variant_rows(make_row) -> Callable[..., list[list[str]]]:
    """Rows of a product with variants: (VARIANTNAME, IMPACTPRICE, QUANTITYVARIANT) triples."""
    def _make(reference: str, name: str, *variants: tuple[str, str, str], **common: str) -> list[list[str]]:
        rows = []
        for i, (vname, impact, qty) in enumerate(variants):
            rows.append(
                make_row(
                    REFERENCE=reference,
                    PRODUCTNAME=name,
                    QUANTITY="0",
                    SIMPLEPRODUCT="FALSE",
                    VARIANTNAME=vname,
                    DEFAULTVARIANT="TRUE" if i == 0 else "FALSE",
                    IMPACTPRICE=impact,
                    QUANTITYVARIANT=qty,
                    **common,
                )
            )
        return rows
    return _make


@pytest.fixture()
def make_csv() -> Callable[..., str]:
    def _make(rows: list[list[str]], delimiter: str = ",", header: list[str] | None = None) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, delimiter=delimiter, lineterminator="\n")
        writer.writerow(header if header is not None else list(COLUMNS))
        writer.writerows(rows)
        return buf.getvalue()
    return _make


@pytest.fixture()
def make_xlsx() -> Callable[..., Path]:
    def _make(path: Path, rows: list[list[object]], header: list[str] | None = None) -> Path:
        df = pd.DataFrame(rows, columns=header if header is not None else list(COLUMNS))
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Produits", index=False)
        return path
    return _make
