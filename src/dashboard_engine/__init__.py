"""
Dashboard engine: typed filtering, aggregation and KPI computation over
uploaded tabular datasets.
"""

from dashboard_engine.core.aggregation import ReducerKind, aggregate, time_series, top_n
from dashboard_engine.core.filter_engine import active_filters, filter_rows, filtered_ids
from dashboard_engine.core.ingestion import dataset_from_frame, export_csv, load_csv
from dashboard_engine.core.kpi import calculate_kpis, classify_column_by_name, detect_kpi_columns
from dashboard_engine.core.predicates import compile_predicate, evaluate_predicate
from dashboard_engine.core.reports import default_chart_columns, format_number, report_presets
from dashboard_engine.core.session import DashboardSession
from dashboard_engine.core.visualization import build_dashboard_charts
from dashboard_engine.models import (
    CategoryFilter,
    Column,
    ColumnType,
    Dataset,
    DateFilter,
    KpiColumnSet,
    KpiRole,
    KpiSummary,
    NumberFilter,
    RowRecord,
    SeriesPoint,
    TextFilter,
    parse_filter,
    parse_filters,
)

__version__ = "1.0.0"

__all__ = [
    # Engine
    "evaluate_predicate",
    "compile_predicate",
    "filter_rows",
    "active_filters",
    "filtered_ids",
    "aggregate",
    "ReducerKind",
    "time_series",
    "top_n",
    "detect_kpi_columns",
    "classify_column_by_name",
    "calculate_kpis",
    # Dashboard helpers
    "DashboardSession",
    "report_presets",
    "default_chart_columns",
    "format_number",
    "build_dashboard_charts",
    "load_csv",
    "dataset_from_frame",
    "export_csv",
    # Models
    "Column",
    "ColumnType",
    "Dataset",
    "RowRecord",
    "TextFilter",
    "NumberFilter",
    "DateFilter",
    "CategoryFilter",
    "parse_filter",
    "parse_filters",
    "KpiColumnSet",
    "KpiRole",
    "KpiSummary",
    "SeriesPoint",
]
