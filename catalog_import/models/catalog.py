from __future__ import annotations

from dataclasses import dataclass, field

"""Catalog entities built by the record builder.

Product and Variant are frozen: once the builder returns them they are only
read (aggregated, serialised, handed to the persistence collaborator).
"""

__all__ = [
    "Product",
    "Variant",
]


@dataclass(frozen=True)
class Variant:
    """Purchasable combination of attributes under one parent product."""
    combination_name: str  # e.g. "Couleur:Rouge-Taille:M"
    attributes: dict[str, str]  # lower-cased key -> value
    price_impact: float  # delta against the parent's tax-inclusive price
    price: float  # parent price_incl_tax + price_impact, 2 decimals
    stock: int
    is_default: bool
    row_number: int  # source row, for error attribution
    image: str = ""


@dataclass(frozen=True)
class Product:
    """Product ready for persistence.

    price_incl_tax is always derived from price_excl_tax and tax_rate. When
    has_variants is True, stock is None and each Variant carries its own.
    """
    designation: str
    code: str
    category_name: str
    brand: str
    description: str
    cost_price: float
    price_excl_tax: float  # prixHT
    tax_rate: float  # taxe, percent
    price_incl_tax: float  # prixTTC (derived)
    sellable: bool
    has_variants: bool
    stock: int | None
    row_number: int  # first row of the group
    variants: tuple[Variant, ...] = field(default_factory=tuple)
    image: str = ""
    action: str = "CREATE"

    @property
    def variant_count(self) -> int:
        return len(self.variants)
