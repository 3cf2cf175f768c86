from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from ..models.catalog import Product, Variant
from ..models.config_models import CatalogSettings
from ..models.import_result import RowError
from ..models.row_data import RawRow
from ..tabular import columns as col

"""Product / Variant construction from one group of rows.

Rules:
- SIMPLEPRODUCT is authoritative when filled in (FALSE -> variants, any other
  value -> simple); when it is blank, more than one row in the group means variants
- SELLPRICETAXEXCLUDE and VAT are required; the tax-inclusive price is always
  recomputed (the SELLPRICETAXINCLUDE column is ignored)
- IMPACTPRICE is required on every variant row
- quantities default to 0 when blank or unreadable

A failure while building one group becomes a RowError for that group only.
"""

__all__ = [
    "RecordBuildError",
    "MissingFieldError",
    "InvalidNumberError",
    "parse_number",
    "parse_attributes",
    "round_money",
    "price_including_tax",
    "build_product",
    "build_group",
]

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


class RecordBuildError(ValueError):
    """Base class for errors that fail a single product group."""
    error_type = "RECORD_BUILD_ERROR"


class MissingFieldError(RecordBuildError):
    error_type = "MISSING_FIELD"

    def __init__(self, field: str, row_number: int | None = None) -> None:
        self.field = field
        self.row_number = row_number
        where = f"row {row_number}: " if row_number is not None else ""
        super().__init__(f"{where}{field} is required")


class InvalidNumberError(RecordBuildError):
    error_type = "INVALID_NUMBER"

    def __init__(self, field: str, raw: str, row_number: int | None = None) -> None:
        self.field = field
        self.raw = raw
        self.row_number = row_number
        where = f"row {row_number}: " if row_number is not None else ""
        super().__init__(f"{where}{field} is not a valid number: {raw!r}")


def parse_number(
    value: str | float | None,
    field: str,
    *,
    default: float = 0.0,
    required: bool = False,
    row_number: int | None = None,
) -> float:
    """Parse a decimal cell accepting ',' or '.' as decimal separator.

    Blank -> default (or MissingFieldError when required).
    Unparsable -> InvalidNumberError naming the field and the raw value.
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        if required:
            raise MissingFieldError(field, row_number)
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        raw = str(value).strip()
        try:
            number = float(raw.replace(",", "."))
        except ValueError:
            raise InvalidNumberError(field, raw, row_number) from None
    if not math.isfinite(number):
        raise InvalidNumberError(field, str(value), row_number)
    return number


def parse_attributes(combination_name: str | None, separator: str = "-") -> dict[str, str]:
    """Split "Couleur:Rouge-Taille:M" into {"couleur": "Rouge", "taille": "M"}.

    Tokens without both a key and a value are ignored; the first occurrence of
    a key wins.
    """
    if not combination_name:
        return {}
    attributes: dict[str, str] = {}
    for token in str(combination_name).split(separator):
        key, sep, value = token.partition(":")
        key = key.strip().lower()
        value = value.strip()
        if not sep or not key or not value:
            continue
        attributes.setdefault(key, value)
    return attributes


def round_money(value: float | Decimal) -> float:
    """Round half-up to 2 decimals on the decimal value (18.005 -> 18.01)."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def price_including_tax(price_excl_tax: float, tax_rate: float) -> float:
    ht = Decimal(str(price_excl_tax))
    return round_money(ht + ht * Decimal(str(tax_rate)) / 100)


def _quantity(row: RawRow, column: str) -> int:
    try:
        return int(parse_number(row.text(column), column, row_number=row.row_number))
    except InvalidNumberError as e:
        logger.warning("%s -> using 0", e)
        return 0


def _has_variants(rows: Sequence[RawRow]) -> bool:
    marker = rows[0].text(col.SIMPLEPRODUCT)
    if marker:
        return marker.upper() == "FALSE"
    return len(rows) > 1


def _build_variant(row: RawRow, base_price: float, separator: str) -> Variant:
    impact = parse_number(
        row.text(col.IMPACTPRICE), col.IMPACTPRICE, required=True, row_number=row.row_number
    )
    name = row.text(col.VARIANTNAME)
    return Variant(
        combination_name=name,
        attributes=parse_attributes(name, separator),
        price_impact=impact,
        price=round_money(Decimal(str(base_price)) + Decimal(str(impact))),
        stock=_quantity(row, col.QUANTITYVARIANT),
        is_default=row.flag(col.DEFAULTVARIANT) is True,
        row_number=row.row_number,
        image=row.text(col.VARIANTIMAGE),
    )


def build_product(key: str, rows: Sequence[RawRow], settings: CatalogSettings | None = None) -> Product:
    """Build one Product (with its Variants) from a group of rows.

    The first row is authoritative for product-level fields.

    Raises:
        MissingFieldError: PRODUCTNAME, SELLPRICETAXEXCLUDE, VAT or a variant's
            IMPACTPRICE is blank
        InvalidNumberError: a price or tax cell cannot be read as a number
    """
    if not rows:
        raise ValueError(f"empty group {key!r}")
    settings = settings or CatalogSettings()
    first = rows[0]
    n = first.row_number

    designation = first.text(col.PRODUCTNAME)
    if not designation:
        raise MissingFieldError(col.PRODUCTNAME, n)

    price_excl_tax = parse_number(
        first.text(col.SELLPRICETAXEXCLUDE), col.SELLPRICETAXEXCLUDE, required=True, row_number=n
    )
    tax_rate = parse_number(first.text(col.VAT), col.VAT, required=True, row_number=n)
    cost_price = parse_number(first.text(col.COSTPRICE), col.COSTPRICE, row_number=n)
    price_incl_tax = price_including_tax(price_excl_tax, tax_rate)

    has_variants = _has_variants(rows)
    if has_variants:
        variants = tuple(
            _build_variant(row, price_incl_tax, settings.variant_separator) for row in rows
        )
        stock = None
    else:
        if len(rows) > 1:
            logger.warning(
                "product %r is marked simple but has %d rows; rows %s ignored",
                key,
                len(rows),
                [r.row_number for r in rows[1:]],
            )
        variants = ()
        stock = _quantity(first, col.QUANTITY)

    return Product(
        designation=designation,
        code=first.text(col.REFERENCE),
        category_name=first.text(col.CATEGORY) or settings.default_category,
        brand=first.text(col.BRAND),
        description=first.text(col.DESCRIPTION),
        cost_price=cost_price,
        price_excl_tax=price_excl_tax,
        tax_rate=tax_rate,
        price_incl_tax=price_incl_tax,
        sellable=first.flag(col.SELLABLE) is True,
        has_variants=has_variants,
        stock=stock,
        row_number=n,
        variants=variants,
        image=first.text(col.IMAGE),
        action=first.text(col.ACTION).upper() or "CREATE",
    )


def build_group(key: str, rows: Sequence[RawRow], settings: CatalogSettings | None = None) -> Product | RowError:
    """build_product with per-group failure isolation.

    Any error is returned as a RowError carrying the group's first row number
    and reference code instead of being raised.
    """
    first_row = rows[0].row_number if rows else -1
    code = rows[0].text(col.REFERENCE) if rows else ""
    try:
        return build_product(key, rows, settings)
    except RecordBuildError as e:
        return RowError(row_number=first_row, code=code, message=str(e), error_type=e.error_type)
    except Exception as e:
        logger.exception("unexpected error building product %r", key)
        return RowError(row_number=first_row, code=code, message=str(e), error_type="UNEXPECTED_ERROR")
