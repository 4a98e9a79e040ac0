"""
Predicate evaluation: does one row satisfy one filter?

Evaluation is total. A filter the engine cannot interpret (unknown column
type, unknown operator, or a column the row does not have) passes every row.
Coercion failures behave like NaN: every comparison against them is False.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Set, Type, Union

import pandas as pd

from dashboard_engine.core.coercion import is_missing, to_number, to_text, to_timestamp
from dashboard_engine.models import (
    CategoryFilter,
    CategoryOperator,
    DateFilter,
    DateOperator,
    FilterBase,
    NumberFilter,
    NumberOperator,
    RowRecord,
    TextFilter,
    TextOperator,
    parse_filter,
)

Row = Mapping[str, Any]
Predicate = Callable[[Row], bool]

KNOWN_OPERATORS: Dict[Type[FilterBase], Set[str]] = {
    TextFilter: {op.value for op in TextOperator},
    NumberFilter: {op.value for op in NumberOperator},
    DateFilter: {op.value for op in DateOperator},
    CategoryFilter: {op.value for op in CategoryOperator},
}


def _always(_row: Row) -> bool:
    return True


def _never(_row: Row) -> bool:
    return False


def is_interpretable(flt: FilterBase) -> bool:
    """Whether the filter's type and operator are ones the engine evaluates."""
    known = KNOWN_OPERATORS.get(type(flt))
    if known is None:
        return False
    # Category filters have a single implicit operator
    if isinstance(flt, CategoryFilter):
        return True
    return flt.operator in known


def _text_predicate(flt: TextFilter) -> Predicate:
    column = flt.column_name
    needle = flt.value.lower()
    op = flt.operator

    if op == TextOperator.EQUALS.value:
        test = lambda text: text == needle
    elif op == TextOperator.CONTAINS.value:
        test = lambda text: needle in text
    elif op == TextOperator.STARTS_WITH.value:
        test = lambda text: text.startswith(needle)
    elif op == TextOperator.ENDS_WITH.value:
        test = lambda text: text.endswith(needle)
    else:
        return _always

    # Missing cells compare as "" (an empty filter value matches them)
    return lambda row: column not in row or test(to_text(row[column]).lower())


def _bound_number(raw: Any) -> float:
    """Filter value as a number; a blank entry reads as 0, unlike a blank cell."""
    if isinstance(raw, str) and not raw.strip():
        return 0.0
    return to_number(raw)


def _number_predicate(flt: NumberFilter) -> Predicate:
    column = flt.column_name
    low = _bound_number(flt.value)
    # Upper bound falls back to the lower one when left empty
    high = low if is_missing(flt.value_to) or not flt.value_to else _bound_number(flt.value_to)
    op = flt.operator

    if op == NumberOperator.EQUALS.value:
        test = lambda n: n == low
    elif op == NumberOperator.GREATER_THAN.value:
        test = lambda n: n > low
    elif op == NumberOperator.LESS_THAN.value:
        test = lambda n: n < low
    elif op == NumberOperator.BETWEEN.value:
        test = lambda n: low <= n <= high
    else:
        return _always

    return lambda row: column not in row or test(to_number(row[column]))


def _date_bound(raw: Any) -> Union[pd.Timestamp, None, bool]:
    """Parsed bound, None when not given, False when given but unparseable."""
    if is_missing(raw) or not raw:
        return None
    parsed = to_timestamp(raw)
    return parsed if parsed is not None else False


def _date_predicate(flt: DateFilter) -> Predicate:
    if flt.operator != DateOperator.DATE_RANGE.value:
        return _always

    column = flt.column_name
    start = _date_bound(flt.date_from)
    end = _date_bound(flt.date_to)
    if start is None and end is None:
        return _always
    # An invalid bound compares false against everything
    if start is False or end is False:
        return lambda row: column not in row

    def test(row: Row) -> bool:
        if column not in row:
            return True
        ts = to_timestamp(row[column])
        if ts is None:
            return False
        if start is not None and ts < start:
            return False
        if end is not None and ts > end:
            return False
        return True

    return test


def _category_predicate(flt: CategoryFilter) -> Predicate:
    if not flt.values:
        return _always
    column = flt.column_name
    selected = frozenset(flt.values)

    def test(row: Row) -> bool:
        if column not in row:
            return True
        value = row[column]
        return not is_missing(value) and to_text(value) in selected

    return test


_BUILDERS: Dict[Type[FilterBase], Callable[[Any], Predicate]] = {
    TextFilter: _text_predicate,
    NumberFilter: _number_predicate,
    DateFilter: _date_predicate,
    CategoryFilter: _category_predicate,
}


def compile_predicate(flt: FilterBase) -> Predicate:
    """
    Turn a filter into a row predicate. Bounds and filter values are
    coerced once here instead of once per row.
    """
    builder: Optional[Callable[[Any], Predicate]] = _BUILDERS.get(type(flt))
    if builder is None:
        return _always
    return builder(flt)


def evaluate_predicate(
    flt: Union[FilterBase, Dict[str, Any]],
    row: Union[Row, RowRecord],
) -> bool:
    """
    Evaluate one filter against one row.

    Args:
        flt: A filter model or a raw camelCase payload (see ``parse_filter``).
        row: Column name -> cell mapping, or a RowRecord.

    Returns:
        bool: True when the row satisfies the filter. The ``isActive`` flag is
        not consulted here; the filter engine skips inactive filters.
    """
    flt = parse_filter(flt)
    data = row.data if isinstance(row, RowRecord) else row
    return compile_predicate(flt)(data)
