"""
Dashboard session: a dataset plus the user's filter set, with derived
results (filtered rows, KPIs, chart series) cached until the next edit.

Every mutation bumps a revision counter; cached values are keyed on it, so
results are recomputed exactly once after each change and reused between
changes.
"""

from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, Union

from pydantic.alias_generators import to_camel

from dashboard_engine.core.aggregation import ReducerKind, aggregate, reducer_kind, time_series
from dashboard_engine.core.filter_engine import filter_rows
from dashboard_engine.core.ingestion import export_csv
from dashboard_engine.core.kpi import ColumnClassifier, calculate_kpis, detect_kpi_columns
from dashboard_engine.models import (
    ColumnType,
    Dataset,
    Filter,
    FilterBase,
    KpiColumnSet,
    KpiSummary,
    RowRecord,
    SeriesPoint,
    parse_filter,
)
from dashboard_engine.utils.exceptions import UnknownFilterError
from dashboard_engine.utils.logger import get_logger

logger = get_logger(__name__)

_SPECIAL_ALIASES = {"date_from": "from", "date_to": "to"}


def _payload_keys(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Rename snake_case keys to the camelCase payload names filters dump to."""
    renamed = {}
    for key, value in changes.items():
        if key in _SPECIAL_ALIASES:
            key = _SPECIAL_ALIASES[key]
        elif "_" in key:
            key = to_camel(key)
        renamed[key] = value
    return renamed


class DashboardSession:
    """Holds one dataset and its filters; recomputes derived views on change."""

    def __init__(self, dataset: Dataset, classifier: Optional[ColumnClassifier] = None):
        self._dataset = dataset
        self._classifier = classifier
        self._filters: List[Filter] = []
        self._revision = 0
        self._cache: Dict[Hashable, Tuple[int, Any]] = {}

    # ── state ─────────────────────────────────────────────────────────────────
    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def filters(self) -> List[Filter]:
        return list(self._filters)

    @property
    def revision(self) -> int:
        return self._revision

    def _changed(self) -> None:
        self._revision += 1

    def _cached(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        hit = self._cache.get(key)
        if hit is not None and hit[0] == self._revision:
            return hit[1]
        value = compute()
        self._cache[key] = (self._revision, value)
        return value

    def _index_of(self, filter_id: str) -> int:
        for i, flt in enumerate(self._filters):
            if flt.id == filter_id:
                return i
        raise UnknownFilterError(filter_id)

    # ── filter editing ────────────────────────────────────────────────────────
    def set_dataset(self, dataset: Dataset) -> None:
        """Swap in a refreshed dataset (e.g. after edits were persisted)."""
        self._dataset = dataset
        self._changed()

    def add_filter(self, payload: Union[FilterBase, Dict[str, Any]]) -> Filter:
        flt = parse_filter(payload)
        self._filters.append(flt)
        self._changed()
        logger.debug(f"Added filter {flt.id} on '{flt.column_name}'.")
        return flt

    def update_filter(self, filter_id: str, **changes: Any) -> Filter:
        """
        Merge changes (snake_case or camelCase keys) into a filter. Changing
        ``column_type`` re-parses it into the matching variant.
        """
        index = self._index_of(filter_id)
        current = self._filters[index]
        merged = {**current.model_dump(by_alias=True), **_payload_keys(changes), "id": filter_id}
        updated = parse_filter(merged)
        self._filters[index] = updated
        self._changed()
        return updated

    def remove_filter(self, filter_id: str) -> None:
        del self._filters[self._index_of(filter_id)]
        self._changed()

    def clear_filters(self) -> None:
        self._filters = []
        self._changed()

    def active_filter_count(self) -> int:
        return sum(1 for f in self._filters if f.is_active)

    # ── derived views ─────────────────────────────────────────────────────────
    @property
    def filtered_records(self) -> List[RowRecord]:
        return self._cached(
            "records",
            lambda: filter_rows(self._dataset.rows, self._filters, self._dataset.columns),
        )

    @property
    def filtered_rows(self) -> List[Dict[str, Any]]:
        return self._cached("rows", lambda: [r.data for r in self.filtered_records])

    @property
    def filtered_row_ids(self) -> List[str]:
        return self._cached("ids", lambda: [r.id for r in self.filtered_records])

    @property
    def kpi_columns(self) -> KpiColumnSet:
        return self._cached(
            "kpi_columns",
            lambda: detect_kpi_columns(self._dataset.columns, self._classifier),
        )

    @property
    def kpis(self) -> Optional[KpiSummary]:
        """KPI summary of the filtered rows; None when no row passes."""
        def compute() -> Optional[KpiSummary]:
            rows = self.filtered_rows
            if not rows:
                return None
            return calculate_kpis(rows, self.kpi_columns)
        return self._cached("kpis", compute)

    def chart_series(
        self,
        group_by: str,
        value_column: str,
        reducer: Union[ReducerKind, str] = ReducerKind.SUM,
    ) -> List[SeriesPoint]:
        kind = reducer_kind(reducer)
        return self._cached(
            ("series", group_by, value_column, kind),
            lambda: aggregate(self.filtered_rows, group_by, value_column, kind),
        )

    def time_series(self, value_column: str) -> List[SeriesPoint]:
        """Value over the dataset's first date column; empty without one."""
        date_columns = self._dataset.columns_of_type(ColumnType.DATE)
        if not date_columns:
            return []
        date_column = date_columns[0].name
        return self._cached(
            ("time_series", date_column, value_column),
            lambda: time_series(self.filtered_rows, date_column, value_column),
        )

    def export_csv(self) -> str:
        """Filtered rows as CSV text."""
        return export_csv(self.filtered_rows, self._dataset.columns)
