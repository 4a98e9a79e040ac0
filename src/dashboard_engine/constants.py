"""Column-name hints used to recognise KPI columns and report presets."""

from typing import Tuple

# Monetary columns (KPI revenue role, currency formatting)
REVENUE_HINTS: Tuple[str, ...] = (
    "price", "amount", "total", "revenue", "sales",
    "cost", "value", "payment", "fee",
)

QUANTITY_HINTS: Tuple[str, ...] = ("quantity", "qty")

CUSTOMER_HINTS: Tuple[str, ...] = ("customer", "client")
PRODUCT_HINTS: Tuple[str, ...] = ("product", "item")
CATEGORY_HINTS: Tuple[str, ...] = ("category", "type")

# Any grouping column counts for the KPI category role
GROUPING_HINTS: Tuple[str, ...] = CUSTOMER_HINTS + PRODUCT_HINTS + CATEGORY_HINTS

# Narrower set used for "Sales by ..." report presets
AMOUNT_HINTS: Tuple[str, ...] = ("amount", "total", "sales")


def name_matches(name: str, hints: Tuple[str, ...]) -> bool:
    """Case-insensitive substring match of a column name against hints."""
    lowered = name.lower()
    return any(hint in lowered for hint in hints)
