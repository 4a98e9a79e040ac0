"""
KPI detection and calculation.

Detection is a name heuristic kept behind a replaceable classifier: any
callable mapping a Column to the KPI roles it could fill (best first).
Calculation makes a single pass over the filtered rows and never raises on
bad data; missing columns simply leave their KPIs unset.
"""

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from dashboard_engine.constants import GROUPING_HINTS, QUANTITY_HINTS, REVENUE_HINTS, name_matches
from dashboard_engine.core.coercion import NAN, is_missing, to_number, to_text, to_timestamp
from dashboard_engine.models import (
    Column,
    ColumnType,
    DateTrend,
    KpiColumnSet,
    KpiRole,
    KpiSummary,
    RowRecord,
)
from dashboard_engine.utils.logger import get_logger

logger = get_logger(__name__)

ColumnClassifier = Callable[[Column], Sequence[KpiRole]]


def classify_column_by_name(column: Column) -> List[KpiRole]:
    """Candidate KPI roles for a column, judged by its type and name."""
    if column.type == ColumnType.NUMBER:
        roles = []
        if name_matches(column.name, REVENUE_HINTS):
            roles.append(KpiRole.REVENUE)
        if name_matches(column.name, QUANTITY_HINTS):
            roles.append(KpiRole.QUANTITY)
        return roles
    if column.type == ColumnType.DATE:
        return [KpiRole.DATE]
    if column.type in (ColumnType.TEXT, ColumnType.CATEGORY):
        if name_matches(column.name, GROUPING_HINTS):
            return [KpiRole.CATEGORY]
    return []


def detect_kpi_columns(
    columns: Iterable[Union[Column, Mapping[str, Any]]],
    classifier: Optional[ColumnClassifier] = None,
) -> KpiColumnSet:
    """
    Pick one column per KPI role.

    Columns are visited in declaration order; each takes the first of its
    candidate roles that is still free, so the earliest matching column wins
    a role and no column holds two roles.
    """
    classify = classifier or classify_column_by_name
    assigned: Dict[KpiRole, str] = {}

    for raw in columns:
        column = raw if isinstance(raw, Column) else Column.model_validate(raw)
        for role in classify(column):
            role = KpiRole(role)
            if role not in assigned:
                assigned[role] = column.name
                break

    detected = KpiColumnSet(
        revenue_column=assigned.get(KpiRole.REVENUE),
        quantity_column=assigned.get(KpiRole.QUANTITY),
        date_column=assigned.get(KpiRole.DATE),
        category_column=assigned.get(KpiRole.CATEGORY),
    )
    logger.debug(f"Detected KPI columns: {detected.model_dump()}")
    return detected


def _number_or_nan(data: Mapping[str, Any], column: Optional[str]) -> float:
    return to_number(data.get(column)) if column else NAN


def calculate_kpis(
    rows: Sequence[Union[Mapping[str, Any], RowRecord]],
    kpi_columns: KpiColumnSet,
) -> KpiSummary:
    """
    Compute the KPI summary over the (already filtered) rows.

    Totals for a detected column with no numeric values are 0; KPIs whose
    role has no column stay None. The trend tracks revenue per day, or
    quantity when there is no revenue column, or the row count otherwise.
    """
    revenue_col = kpi_columns.revenue_column
    quantity_col = kpi_columns.quantity_column
    date_col = kpi_columns.date_column
    category_col = kpi_columns.category_column

    revenue_total, revenue_count = 0.0, 0
    quantity_total, quantity_count = 0.0, 0
    per_category: Dict[str, float] = {}
    per_day: Dict[pd.Timestamp, float] = {}

    for row in rows:
        data = row.data if isinstance(row, RowRecord) else row

        revenue = _number_or_nan(data, revenue_col)
        if not math.isnan(revenue):
            revenue_total += revenue
            revenue_count += 1

        quantity = _number_or_nan(data, quantity_col)
        if not math.isnan(quantity):
            quantity_total += quantity
            quantity_count += 1

        if revenue_col:
            measure = revenue
        elif quantity_col:
            measure = quantity
        else:
            measure = 1.0
        if math.isnan(measure):
            measure = 0.0

        if category_col:
            value = data.get(category_col)
            if not is_missing(value):
                key = to_text(value)
                per_category[key] = per_category.get(key, 0.0) + measure

        if date_col:
            ts = to_timestamp(data.get(date_col))
            if ts is not None:
                day = ts.normalize()
                per_day[day] = per_day.get(day, 0.0) + measure

    summary = KpiSummary(row_count=len(rows))
    if revenue_col:
        summary.total_revenue = revenue_total
        summary.average_revenue = revenue_total / revenue_count if revenue_count else 0.0
    if quantity_col:
        summary.total_quantity = quantity_total
        summary.average_quantity = quantity_total / quantity_count if quantity_count else 0.0
    if category_col:
        summary.category_count = len(per_category)
        if per_category:
            summary.top_category = max(per_category, key=per_category.get)
    if per_day:
        summary.trend = _trend(per_day)

    return summary


def _trend(per_day: Dict[pd.Timestamp, float]) -> DateTrend:
    start, end = min(per_day), max(per_day)
    first, last = per_day[start], per_day[end]
    delta = last - first
    return DateTrend(
        start=start.to_pydatetime(),
        end=end.to_pydatetime(),
        span_days=(end - start).days,
        first_value=first,
        last_value=last,
        delta=delta,
        delta_percent=(delta / abs(first) * 100.0) if first else None,
    )
