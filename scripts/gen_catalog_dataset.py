#!/usr/bin/env python3
"""Synthetic catalog generator for throughput checks.

Writes a file in the 19-column import layout (.csv, .tsv or .xlsx) mixing
simple products and products with size/colour variants, so that
``catalog-import import`` can be timed on realistic volumes.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from catalog_import.tabular.columns import COLUMNS

CATEGORIES = ["Epicerie", "Textile", "Maison", "Jardin", "Sport", ""]
COLOURS = ["Rouge", "Bleu", "Vert", "Noir"]
SIZES = ["S", "M", "L", "XL"]


def generate_catalog(products: int, variant_ratio: float = 0.3, seed: int = 42) -> pd.DataFrame:
    """One row per simple product, 2 to 6 rows per product with variants."""
    rng = np.random.default_rng(seed)
    rows: list[dict[str, str]] = []
    for i in range(products):
        ht = round(float(rng.uniform(0.5, 500)), 2)
        vat = str(rng.choice(["5.5", "10", "20"]))
        common = {
            "ACTION": "CREATE",
            "PRODUCTNAME": f"Article {i}",
            "REFERENCE": f"REF{i:07d}",
            "CATEGORY": str(rng.choice(CATEGORIES)),
            "BRAND": f"Marque {i % 50}",
            "DESCRIPTION": f"Description de l'article {i}, avec détails",
            "COSTPRICE": f"{ht * 0.6:.2f}",
            "SELLPRICETAXEXCLUDE": f"{ht:.2f}",
            "VAT": vat,
            "SELLABLE": "TRUE",
        }
        if rng.random() >= variant_ratio:
            rows.append({**common, "QUANTITY": str(int(rng.integers(0, 1000))), "SIMPLEPRODUCT": "TRUE"})
            continue
        n = int(rng.integers(2, 7))
        for j in range(n):
            rows.append(
                {
                    **common,
                    "QUANTITY": "0",
                    "SIMPLEPRODUCT": "FALSE",
                    "VARIANTNAME": f"Couleur:{COLOURS[j % len(COLOURS)]}-Taille:{SIZES[j // len(COLOURS)]}",
                    "DEFAULTVARIANT": "TRUE" if j == 0 else "FALSE",
                    "IMPACTPRICE": f"{j * 0.5:.2f}",
                    "QUANTITYVARIANT": str(int(rng.integers(0, 200))),
                }
            )
    return pd.DataFrame(rows, columns=list(COLUMNS)).fillna("")


def write_catalog(df: pd.DataFrame, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    suffix = output.suffix.lower()
    if suffix == ".xlsx":
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Produits", index=False)
    elif suffix in (".csv", ".tsv", ".txt"):
        df.to_csv(output, sep="\t" if suffix == ".tsv" else ",", index=False)
    else:
        raise ValueError(f"unsupported output type: {suffix}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic catalog in the import layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/catalog.csv
  %(prog)s data/big.xlsx --products 20000 --variant-ratio 0.5
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv, .tsv, .txt or .xlsx)")
    parser.add_argument("--products", type=int, default=10_000, help="Number of products (default: 10,000)")
    parser.add_argument("--variant-ratio", type=float, default=0.3, help="Share of products with variants")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.products <= 0:
        print("Error: --products must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.variant_ratio <= 1:
        print("Error: --variant-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    try:
        df = generate_catalog(args.products, args.variant_ratio, args.seed)
        write_catalog(df, args.output)
    except (OSError, ValueError) as e:
        print(f"Error generating catalog: {e}", file=sys.stderr)
        return 1
    print(f"Created {args.output}: {args.products:,} products, {len(df):,} rows")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
