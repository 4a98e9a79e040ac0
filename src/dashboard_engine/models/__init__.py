"""Data models package."""

from dashboard_engine.models.dataset import (
    ColumnType,
    Column,
    RowRecord,
    Dataset,
)
from dashboard_engine.models.filters import (
    TextOperator,
    NumberOperator,
    DateOperator,
    CategoryOperator,
    FilterBase,
    TextFilter,
    NumberFilter,
    DateFilter,
    CategoryFilter,
    UnknownFilter,
    Filter,
    parse_filter,
    parse_filters,
)
from dashboard_engine.models.kpi import (
    KpiRole,
    KpiColumnSet,
    DateTrend,
    KpiSummary,
)
from dashboard_engine.models.charts import (
    SeriesPoint,
    ReportPreset,
)

__all__ = [
    # Dataset
    "ColumnType",
    "Column",
    "RowRecord",
    "Dataset",
    # Filters
    "TextOperator",
    "NumberOperator",
    "DateOperator",
    "CategoryOperator",
    "FilterBase",
    "TextFilter",
    "NumberFilter",
    "DateFilter",
    "CategoryFilter",
    "UnknownFilter",
    "Filter",
    "parse_filter",
    "parse_filters",
    # KPI
    "KpiRole",
    "KpiColumnSet",
    "DateTrend",
    "KpiSummary",
    # Charts
    "SeriesPoint",
    "ReportPreset",
]
