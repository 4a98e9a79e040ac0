"""
Aggregation engine: group rows on one column and reduce another into a
chart series.

``aggregate`` keeps groups in first-seen order and neither sorts nor
truncates; chart callers do that with ``top_n`` and ``time_series``.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from dashboard_engine.config import settings
from dashboard_engine.core.coercion import to_number, to_text, to_timestamp
from dashboard_engine.models import RowRecord, SeriesPoint
from dashboard_engine.utils.exceptions import UnsupportedReducerError
from dashboard_engine.utils.logger import get_logger

logger = get_logger(__name__)


class ReducerKind(str, Enum):
    SUM = "sum"
    COUNT = "count"
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"


class _Group:
    __slots__ = ("total", "numeric", "rows", "low", "high")

    def __init__(self):
        self.total = 0.0
        self.numeric = 0
        self.rows = 0
        self.low = math.inf
        self.high = -math.inf

    def add(self, number: float) -> None:
        self.rows += 1
        if math.isnan(number):
            return
        self.total += number
        self.numeric += 1
        self.low = min(self.low, number)
        self.high = max(self.high, number)

    def reduce(self, kind: ReducerKind) -> float:
        if kind is ReducerKind.SUM:
            return self.total
        if kind is ReducerKind.COUNT:
            return float(self.rows)
        if not self.numeric:
            return 0.0
        if kind is ReducerKind.AVERAGE:
            return self.total / self.numeric
        if kind is ReducerKind.MIN:
            return self.low
        return self.high


def reducer_kind(reducer: Union[ReducerKind, str]) -> ReducerKind:
    """Resolve a reducer name; an unknown one is a caller error."""
    try:
        return ReducerKind(reducer)
    except (ValueError, TypeError):
        raise UnsupportedReducerError(reducer) from None


def aggregate(
    rows: Sequence[Union[Mapping[str, Any], RowRecord]],
    group_by: str,
    value_column: str,
    reducer: Union[ReducerKind, str] = ReducerKind.SUM,
) -> List[SeriesPoint]:
    """
    Group rows by the string form of ``group_by`` and reduce ``value_column``.

    Missing group values fall into the "" group. Values that do not parse as
    numbers count as 0 for ``sum`` and are skipped by ``average``/``min``/``max``.

    Raises:
        UnsupportedReducerError: If ``reducer`` is not a ReducerKind.
    """
    kind = reducer_kind(reducer)
    if not rows or not group_by or not value_column:
        return []

    groups: Dict[str, _Group] = {}
    for row in rows:
        data = row.data if isinstance(row, RowRecord) else row
        key = to_text(data.get(group_by))
        group = groups.get(key)
        if group is None:
            group = groups[key] = _Group()
        group.add(to_number(data.get(value_column)))

    logger.debug(
        f"Aggregated {len(rows)} rows into {len(groups)} groups "
        f"({kind.value} of '{value_column}' by '{group_by}')."
    )
    return [SeriesPoint(name=key, value=g.reduce(kind)) for key, g in groups.items()]


def top_n(series: Sequence[SeriesPoint], n: Optional[int] = None) -> List[SeriesPoint]:
    """First ``n`` points of a series (CHART_TOP_N by default), order kept."""
    limit = settings.CHART_TOP_N if n is None else max(n, 0)
    return list(series[:limit])


def date_label(ts) -> str:
    """Short axis label such as 'Jan 5'."""
    return f"{ts:%b} {ts.day}"


def time_series(
    rows: Sequence[Union[Mapping[str, Any], RowRecord]],
    date_column: str,
    value_column: str,
    reducer: Union[ReducerKind, str] = ReducerKind.SUM,
) -> List[SeriesPoint]:
    """
    Aggregate by a date column, then order the points chronologically and
    label them with a short date. Keys that do not parse as dates keep their
    raw label and go last.
    """
    series = aggregate(rows, date_column, value_column, reducer)
    dated = [(to_timestamp(point.name), point) for point in series]
    valid = sorted((item for item in dated if item[0] is not None), key=lambda item: item[0])
    invalid = [point for ts, point in dated if ts is None]
    return (
        [SeriesPoint(name=date_label(ts), value=point.value) for ts, point in valid]
        + invalid
    )
