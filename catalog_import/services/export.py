from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.catalog import Product
from ..models.distribution import DistributionPlan, ProductStock, WarehouseId, WarehouseShare
from ..tabular.columns import COLUMNS

"""Files produced for operators: the import template and warehouse stock exports.

Both use the 19-column import layout, so exports can be imported again. A
product with variants is exported as one default variant (impact 0) carrying
its total warehouse quantity. export_distribution writes one file per
configured warehouse from a distribution plan.
"""

__all__ = [
    "TEMPLATE_ROWS",
    "write_template",
    "warehouse_export_name",
    "export_warehouse_stock",
    "catalog_stock",
    "stock_by_warehouse",
    "export_distribution",
]

logger = logging.getLogger(__name__)

TEMPLATE_ROWS: list[list[str]] = [
    [
        "CREATE", "product_image.jpg", "Produit Simple Exemple", "PROD001",
        "Catégorie Exemple", "Marque Exemple", "Description du produit", "10.0", "15.0",
        "20.0", "18.0", "100", "TRUE", "TRUE", "", "", "", "", "",
    ],
    [
        "CREATE", "product_with_variants.jpg", "Produit avec Variantes", "PROD002",
        "Catégorie Exemple", "Marque Exemple", "Description du produit avec variantes", "10.0",
        "15.0", "20.0", "18.0", "0", "TRUE", "FALSE", "Couleur:Rouge-Taille:M", "TRUE",
        "variant_image1.jpg", "0", "50",
    ],
    [
        "CREATE", "product_with_variants.jpg", "Produit avec Variantes", "PROD002",
        "Catégorie Exemple", "Marque Exemple", "Description du produit avec variantes", "10.0",
        "15.0", "20.0", "18.0", "0", "TRUE", "FALSE", "Couleur:Bleu-Taille:L", "FALSE",
        "variant_image2.jpg", "1", "30",
    ],
]


def write_template(path: Path) -> Path:
    """Write the CSV import template (header + one simple and one two-variant product)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(COLUMNS)
        writer.writerows(TEMPLATE_ROWS)
    return path


def _decimal_comma(value: float | None) -> str:
    if value is None:
        return ""
    return str(value).replace(".", ",")


def warehouse_export_name(warehouse_name: str) -> str:
    return f"produits_entrepot_{warehouse_name}.xlsx"


def export_warehouse_stock(
    path: Path,
    warehouse_name: str,
    stock: Mapping[Any, int],
    products: Mapping[Any, Product],
) -> int:
    """Write one warehouse's stock as an .xlsx sheet named "Produits".

    Parameters
    ----------
    path: target .xlsx file
    warehouse_name: used for logging only
    stock: product id -> quantity held by the warehouse
    products: product id -> Product (ids missing here are skipped)

    Returns:
        Number of product rows written
    """
    records: list[dict[str, Any]] = []
    for product_id, quantity in stock.items():
        product = products.get(product_id)
        if product is None:
            logger.debug("warehouse=%s unknown product id %s skipped", warehouse_name, product_id)
            continue
        records.append(
            {
                "ACTION": "CREATE",
                "IMAGE": product.image,
                "PRODUCTNAME": product.designation,
                "REFERENCE": product.code,
                "CATEGORY": product.category_name,
                "BRAND": product.brand,
                "DESCRIPTION": product.description,
                "COSTPRICE": _decimal_comma(product.cost_price),
                "SELLPRICETAXEXCLUDE": _decimal_comma(product.price_excl_tax),
                "VAT": _decimal_comma(product.tax_rate),
                "SELLPRICETAXINCLUDE": _decimal_comma(product.price_incl_tax),
                "QUANTITY": quantity,
                "SELLABLE": "TRUE" if product.sellable else "FALSE",
                "SIMPLEPRODUCT": "FALSE" if product.has_variants else "TRUE",
                "VARIANTNAME": "",
                # a variant product becomes one default variant holding the warehouse quantity
                "DEFAULTVARIANT": "TRUE" if product.has_variants else "",
                "VARIANTIMAGE": "",
                "IMPACTPRICE": "0" if product.has_variants else "",
                "QUANTITYVARIANT": quantity if product.has_variants else "",
            }
        )
    df = pd.DataFrame(records, columns=list(COLUMNS))
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Produits", index=False)
    logger.info("warehouse=%s exported %d product(s) to %s", warehouse_name, len(records), path)
    return len(records)


def catalog_stock(products: Iterable[Product]) -> list[ProductStock]:
    """Stock per product keyed by reference code (designation when blank).

    A product with variants contributes the sum of its variants' stock.
    """
    stocks = []
    for p in products:
        total = sum(v.stock for v in p.variants) if p.has_variants else p.stock
        stocks.append(ProductStock(product_id=p.code or p.designation, stock=total))
    return stocks


def stock_by_warehouse(plan: DistributionPlan) -> dict[WarehouseId, dict[Any, int]]:
    tables: dict[WarehouseId, dict[Any, int]] = {}
    for a in plan:
        table = tables.setdefault(a.warehouse_id, {})
        table[a.product_id] = table.get(a.product_id, 0) + a.quantity
    return tables


def export_distribution(
    out_dir: Path,
    products: Sequence[Product],
    plan: DistributionPlan,
    shares: Sequence[WarehouseShare],
) -> list[tuple[Path, int]]:
    """One stock export per configured warehouse, including empty ones.

    Returns:
        (path, rows written) per warehouse, in configuration order
    """
    by_id = {p.code or p.designation: p for p in products}
    tables = stock_by_warehouse(plan)
    written = []
    for share in shares:
        name = share.name or str(share.warehouse_id)
        path = out_dir / warehouse_export_name(name)
        rows = export_warehouse_stock(path, name, tables.get(share.warehouse_id, {}), by_id)
        written.append((path, rows))
    return written
