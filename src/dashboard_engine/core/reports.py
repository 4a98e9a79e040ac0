"""
Chart defaults and ready-made report presets derived from column names.
"""

import math
from typing import Iterable, List, Optional, Tuple

from dashboard_engine.config import settings
from dashboard_engine.constants import (
    AMOUNT_HINTS,
    CATEGORY_HINTS,
    CUSTOMER_HINTS,
    PRODUCT_HINTS,
    QUANTITY_HINTS,
    REVENUE_HINTS,
    name_matches,
)
from dashboard_engine.models import Column, ColumnType, ReportPreset

CUSTOM_PRESET = ReportPreset(value="custom", label="Custom Report")

_GROUPING_TYPES = (ColumnType.CATEGORY, ColumnType.TEXT)


def is_currency_column(name: Optional[str]) -> bool:
    """Whether a column name looks monetary."""
    return bool(name) and name_matches(name, REVENUE_HINTS)


def _first(columns: Iterable[Column], hints: Tuple[str, ...]) -> Optional[Column]:
    return next((c for c in columns if name_matches(c.name, hints)), None)


def default_chart_columns(columns: Iterable[Column]) -> Tuple[Optional[str], Optional[str]]:
    """First text/category column to group by and first number column to sum."""
    columns = list(columns)
    group_col = next((c for c in columns if c.type in _GROUPING_TYPES), None)
    value_col = next((c for c in columns if c.type == ColumnType.NUMBER), None)
    return (
        group_col.name if group_col else None,
        value_col.name if value_col else None,
    )


def report_presets(columns: Iterable[Column]) -> List[ReportPreset]:
    """
    Presets offered for the columns at hand. "Custom Report" always comes
    first; the others appear only when both of their columns exist.
    """
    columns = list(columns)
    grouping = [c for c in columns if c.type in _GROUPING_TYPES]
    numbers = [c for c in columns if c.type == ColumnType.NUMBER]

    customer = _first(grouping, CUSTOMER_HINTS)
    product = _first(grouping, PRODUCT_HINTS)
    category = _first(grouping, CATEGORY_HINTS)
    amount = _first(numbers, AMOUNT_HINTS)
    quantity = _first(numbers, QUANTITY_HINTS)

    candidates = [
        ("sales-by-customer", "Sales by Customer", customer, amount),
        ("qty-by-customer", "Quantity by Customer", customer, quantity),
        ("sales-by-product", "Sales by Product", product, amount),
        ("qty-by-product", "Quantity by Product", product, quantity),
        ("sales-by-category", "Sales by Category", category, amount),
    ]

    presets = [CUSTOM_PRESET]
    for value, label, group_col, value_col in candidates:
        if group_col and value_col:
            presets.append(ReportPreset(
                value=value,
                label=label,
                group_by=group_col.name,
                value_column=value_col.name,
            ))
    return presets


def find_preset(columns: Iterable[Column], value: str) -> Optional[ReportPreset]:
    return next((p for p in report_presets(columns) if p.value == value), None)


def format_number(value: float, style: str = "number") -> str:
    """
    Display form of a KPI or axis value.

    ``number`` is compact (1.2K, 3.4M), ``currency`` uses thousands separators
    and the configured currency label, ``percent`` expects a percentage.
    """
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return "-"
    if style == "currency":
        return f"{value:,.0f} {settings.CURRENCY_LABEL}"
    if style == "percent":
        return f"{value:.1f}%"

    magnitude = abs(value)
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if magnitude >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:.2f}"
