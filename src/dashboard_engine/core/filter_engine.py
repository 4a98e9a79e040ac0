"""
Filter engine: keep the rows that satisfy every active filter.

Rows may be plain mappings or RowRecords. The same row objects come back in
their original order, so record ids reach the caller untouched.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

from dashboard_engine.core.predicates import compile_predicate, is_interpretable
from dashboard_engine.models import Column, FilterBase, RowRecord, parse_filters
from dashboard_engine.utils.logger import get_logger

logger = get_logger(__name__)

RowT = TypeVar("RowT", Mapping[str, Any], RowRecord)


def active_filters(filters: Iterable[Union[FilterBase, dict]]) -> List[FilterBase]:
    """Parse the given filters and keep only the active ones."""
    return [f for f in parse_filters(filters) if f.is_active]


def _known_columns(columns: Optional[Iterable[Union[Column, str]]]) -> Optional[set]:
    if columns is None:
        return None
    return {c.name if isinstance(c, Column) else str(c) for c in columns}


def _applicable(filters: Sequence[FilterBase], columns: Optional[set]) -> List[FilterBase]:
    """Drop filters that would pass every row anyway, logging why once."""
    kept = []
    for flt in filters:
        if columns is not None and flt.column_name not in columns:
            logger.warning(f"Ignoring filter {flt.id}: unknown column '{flt.column_name}'.")
            continue
        if not is_interpretable(flt):
            logger.warning(
                f"Ignoring filter {flt.id}: operator '{flt.operator}' is not supported "
                f"for column type '{getattr(flt, 'column_type', '')}'."
            )
            continue
        kept.append(flt)
    return kept


def filter_rows(
    rows: Sequence[RowT],
    filters: Iterable[Union[FilterBase, dict]],
    columns: Optional[Iterable[Union[Column, str]]] = None,
) -> List[RowT]:
    """
    Return the rows that satisfy every active filter (logical AND).

    Args:
        rows: Row mappings or RowRecords, in display order.
        filters: Parsed filters or raw filter payloads.
        columns: Optional dataset columns; filters on other columns are ignored.

    Returns:
        List of the matching rows, same objects, original relative order.
        With no active filters every row is returned.
    """
    applied = _applicable(active_filters(filters), _known_columns(columns))
    if not applied:
        return list(rows)

    predicates = [compile_predicate(f) for f in applied]
    logger.debug(f"Filtering {len(rows)} rows with {len(predicates)} active filter(s).")

    result = []
    for row in rows:
        data = row.data if isinstance(row, RowRecord) else row
        if all(p(data) for p in predicates):
            result.append(row)

    logger.debug(f"{len(result)} of {len(rows)} rows passed the filters.")
    return result


def filtered_ids(
    records: Sequence[RowRecord],
    filters: Iterable[Union[FilterBase, dict]],
    columns: Optional[Iterable[Union[Column, str]]] = None,
) -> List[str]:
    """Ids of the records that pass the filters, in order."""
    return [r.id for r in filter_rows(records, filters, columns)]
