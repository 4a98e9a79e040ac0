"""
visualization.py
─────────────────────────────────────────────────────────────────────────────
Turns aggregated series into Plotly figures for the dashboard.

Series → Chart mapping
  group-by series (top N)       → Horizontal bar chart
  group-by series (top N)       → Donut chart (share of total)
  date series (chronological)   → Line chart
─────────────────────────────────────────────────────────────────────────────
"""

from typing import Dict, Iterable, List, Mapping, Any, Optional, Sequence, Union

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from dashboard_engine.config import settings
from dashboard_engine.core.aggregation import aggregate, time_series, top_n
from dashboard_engine.core.reports import default_chart_columns, is_currency_column
from dashboard_engine.models import Column, ColumnType, RowRecord, SeriesPoint
from dashboard_engine.utils.logger import get_logger

logger = get_logger(__name__)

# ── colour palette ────────────────────────────────────────────────────────────
COLORS = [
    "#8b5cf6", "#06b6d4", "#10b981", "#f59e0b", "#ef4444",
    "#ec4899", "#6366f1", "#14b8a6", "#84cc16", "#f97316",
]
CLR_LINE = COLORS[0]
CLR_BG   = "rgba(0,0,0,0)"

LAYOUT_BASE = dict(
    paper_bgcolor=CLR_BG,
    plot_bgcolor =CLR_BG,
    font         =dict(size=13),
    margin       =dict(l=60, r=40, t=70, b=60),
    xaxis        =dict(gridcolor="#e5e7eb", zerolinecolor="#e5e7eb"),
    yaxis        =dict(gridcolor="#e5e7eb", zerolinecolor="#e5e7eb"),
)


def _apply_layout(fig, title: str, xlabel: str = None, ylabel: str = None) -> go.Figure:
    updates = dict(**LAYOUT_BASE, title=dict(text=title, font=dict(size=16)))
    if xlabel:
        updates["xaxis"] = {**LAYOUT_BASE.get("xaxis", {}), "title": xlabel}
    if ylabel:
        updates["yaxis"] = {**LAYOUT_BASE.get("yaxis", {}), "title": ylabel}
    fig.update_layout(**updates)
    return fig


def _series_frame(series: Sequence[SeriesPoint]) -> pd.DataFrame:
    return pd.DataFrame([p.model_dump() for p in series], columns=["name", "value"])


def _value_format(value_column: str) -> str:
    suffix = f" {settings.CURRENCY_LABEL}" if is_currency_column(value_column) else ""
    return f"%{{x:,.0f}}{suffix}"


# ── 1. BAR – top N groups ─────────────────────────────────────────────────────
def build_bar_chart(series: Sequence[SeriesPoint], group_by: str, value_column: str) -> Optional[go.Figure]:
    points = top_n(series)
    if not points:
        return None

    df = _series_frame(points)
    fig = go.Figure(go.Bar(
        x=df["value"],
        y=df["name"],
        orientation="h",
        marker_color=[COLORS[i % len(COLORS)] for i in range(len(df))],
        hovertemplate=f"<b>%{{y}}</b><br>{value_column}: {_value_format(value_column)}<extra></extra>",
    ))
    fig = _apply_layout(fig, f"Top {len(df)} <b>{group_by}</b> by <b>{value_column}</b>",
                        xlabel=value_column)
    fig.update_layout(
        yaxis=dict(autorange="reversed", type="category"),
        height=max(280, len(df) * 40),
    )
    return fig


# ── 2. PIE – share of the top N ───────────────────────────────────────────────
def build_pie_chart(series: Sequence[SeriesPoint], value_column: str = "") -> Optional[go.Figure]:
    points = top_n(series)
    if not points:
        return None

    df = _series_frame(points)
    fig = px.pie(
        df, names="name", values="value",
        hole=0.4,
        color_discrete_sequence=COLORS,
    )
    fig.update_traces(textinfo="label+percent", sort=False)
    return _apply_layout(fig, f"Top {len(df)} Distribution" + (f" of <b>{value_column}</b>" if value_column else ""))


# ── 3. LINE – value over time ─────────────────────────────────────────────────
def build_line_chart(series: Sequence[SeriesPoint], value_column: str) -> Optional[go.Figure]:
    if not series:
        return None

    df = _series_frame(series)
    fig = px.line(
        df, x="name", y="value",
        markers=True,
        color_discrete_sequence=[CLR_LINE],
    )
    fig.update_traces(line_width=2, marker_size=6)
    fig = _apply_layout(fig, f"<b>{value_column}</b> over time", ylabel=value_column)
    fig.update_xaxes(type="category")
    return fig


# ── PUBLIC ENTRY POINT ────────────────────────────────────────────────────────
def build_dashboard_charts(
    rows: Sequence[Union[Mapping[str, Any], RowRecord]],
    columns: Iterable[Column],
    group_by: Optional[str] = None,
    value_column: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build the dashboard's charts for the filtered rows.

    Missing ``group_by``/``value_column`` fall back to the first text/category
    and first number column. Returns a dict of Plotly JSON strings keyed
    ``bar``, ``pie`` and (when a date column exists) ``line``; empty when
    there is nothing to plot.
    """
    columns: List[Column] = list(columns)
    default_group, default_value = default_chart_columns(columns)
    group_by = group_by or default_group
    value_column = value_column or default_value

    charts: Dict[str, str] = {}
    if not rows or not value_column:
        logger.info("No rows or value column, skipping charts.")
        return charts

    if group_by:
        series = aggregate(rows, group_by, value_column)
        for key, fig in (("bar", build_bar_chart(series, group_by, value_column)),
                         ("pie", build_pie_chart(series, value_column))):
            if fig is not None:
                charts[key] = fig.to_json()

    date_col = next((c for c in columns if c.type == ColumnType.DATE), None)
    if date_col:
        fig = build_line_chart(time_series(rows, date_col.name, value_column), value_column)
        if fig is not None:
            charts["line"] = fig.to_json()

    logger.info(f"Generated {len(charts)} chart(s) for {len(rows)} rows.")
    return charts
