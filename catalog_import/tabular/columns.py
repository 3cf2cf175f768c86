"""Fixed column contract of the catalog import file (19 columns, in order)."""

ACTION = "ACTION"
IMAGE = "IMAGE"
PRODUCTNAME = "PRODUCTNAME"
REFERENCE = "REFERENCE"
CATEGORY = "CATEGORY"
BRAND = "BRAND"
DESCRIPTION = "DESCRIPTION"
COSTPRICE = "COSTPRICE"
SELLPRICETAXEXCLUDE = "SELLPRICETAXEXCLUDE"
VAT = "VAT"
SELLPRICETAXINCLUDE = "SELLPRICETAXINCLUDE"
QUANTITY = "QUANTITY"
SELLABLE = "SELLABLE"
SIMPLEPRODUCT = "SIMPLEPRODUCT"
VARIANTNAME = "VARIANTNAME"
DEFAULTVARIANT = "DEFAULTVARIANT"
VARIANTIMAGE = "VARIANTIMAGE"
IMPACTPRICE = "IMPACTPRICE"
QUANTITYVARIANT = "QUANTITYVARIANT"

COLUMNS: tuple[str, ...] = (
    ACTION,
    IMAGE,
    PRODUCTNAME,
    REFERENCE,
    CATEGORY,
    BRAND,
    DESCRIPTION,
    COSTPRICE,
    SELLPRICETAXEXCLUDE,
    VAT,
    SELLPRICETAXINCLUDE,
    QUANTITY,
    SELLABLE,
    SIMPLEPRODUCT,
    VARIANTNAME,
    DEFAULTVARIANT,
    VARIANTIMAGE,
    IMPACTPRICE,
    QUANTITYVARIANT,
)

EXPECTED_COLUMN_COUNT = len(COLUMNS)
