import math
from datetime import date, datetime

import pandas as pd
import pytest

from dashboard_engine.config import settings
from dashboard_engine.core.coercion import to_timestamp
from dashboard_engine.core.predicates import evaluate_predicate, is_interpretable
from dashboard_engine.models import (
    CategoryFilter,
    DateFilter,
    NumberFilter,
    RowRecord,
    TextFilter,
    UnknownFilter,
    parse_filter,
)


# --- Tests for Text Predicates ---

@pytest.mark.parametrize("operator, value, cell, expected", [
    ("equals", "east", "East", True),
    ("equals", "EAST", "east", True),
    ("equals", "East", "Eastern", False),
    ("contains", "ST", "East", True),
    ("contains", "north", "East", False),
    ("startsWith", "ea", "East", True),
    ("startsWith", "st", "East", False),
    ("endsWith", "ST", "West", True),
    ("endsWith", "we", "West", False),
    ("equals", "10", 10, True),
    ("equals", "10", 10.0, True),
])
def test_text_operators(operator, value, cell, expected):
    """Text matching is case-insensitive on the string form of the cell."""
    flt = TextFilter(column_name="c", operator=operator, value=value)
    assert evaluate_predicate(flt, {"c": cell}) is expected


def test_text_missing_cell_compares_as_empty_string():
    """Missing cells become "" so an empty filter value matches them."""
    assert evaluate_predicate(TextFilter(column_name="c", value=""), {"c": None}) is True
    assert evaluate_predicate(TextFilter(column_name="c", value="x"), {"c": None}) is False
    assert evaluate_predicate(TextFilter(column_name="c", operator="contains", value=""), {"c": None}) is True
    assert evaluate_predicate(TextFilter(column_name="c", value=""), {"c": math.nan}) is True


def test_text_unknown_operator_passes():
    """An operator the engine does not know lets every row through."""
    flt = TextFilter(column_name="c", operator="regex", value="^E")
    assert evaluate_predicate(flt, {"c": "West"}) is True
    assert is_interpretable(flt) is False


# --- Tests for Number Predicates ---

@pytest.mark.parametrize("operator, value, value_to, cell, expected", [
    ("equals", "10", None, 10, True),
    ("equals", "10", None, "10.0", True),
    ("equals", 10, None, 11, False),
    ("greaterThan", "4", None, 5, True),
    ("greaterThan", "4", None, 4, False),
    ("lessThan", "4", None, 3, True),
    ("lessThan", "4", None, 4, False),
    ("between", "4", "12", 10, True),
    ("between", "4", "12", 4, True),
    ("between", "4", "12", 12, True),
    ("between", "4", "12", 3, False),
    ("between", "4", "12", 13, False),
    ("between", "5", "", 5, True),
    ("between", "5", "", 6, False),
    ("between", "5", None, 6, False),
    ("between", "", "", 0, True),
])
def test_number_operators(operator, value, value_to, cell, expected):
    """Numeric comparisons on coerced cells; an empty upper bound reuses the lower one."""
    flt = NumberFilter(column_name="n", operator=operator, value=value, value_to=value_to)
    assert evaluate_predicate(flt, {"n": cell}) is expected


@pytest.mark.parametrize("operator", ["equals", "greaterThan", "lessThan", "between"])
def test_number_unparseable_cell_never_matches(operator):
    """A cell that is not a number behaves like NaN: all comparisons fail."""
    flt = NumberFilter(column_name="n", operator=operator, value="-1000", value_to="1000")
    assert evaluate_predicate(flt, {"n": "n/a"}) is False
    assert evaluate_predicate(flt, {"n": None}) is False
    assert evaluate_predicate(flt, {"n": ""}) is False


@pytest.mark.parametrize("operator", ["equals", "greaterThan", "lessThan", "between"])
def test_number_unparseable_filter_value_never_matches(operator):
    """A filter value that is not a number matches nothing."""
    flt = NumberFilter(column_name="n", operator=operator, value="abc")
    assert evaluate_predicate(flt, {"n": 1}) is False


def test_number_between_with_unparseable_upper_bound_fails():
    """An unparseable upper bound makes the range empty."""
    flt = NumberFilter(column_name="n", operator="between", value="1", value_to="lots")
    assert evaluate_predicate(flt, {"n": 5}) is False


def test_number_unknown_operator_passes():
    """Unknown number operators pass every row."""
    flt = NumberFilter(column_name="n", operator="notEquals", value="1")
    assert evaluate_predicate(flt, {"n": 1}) is True


@pytest.mark.parametrize("operator, value, cell, expected", [
    ("equals", "", 0, True),
    ("equals", "   ", 0, True),
    ("equals", "", 3, False),
    ("greaterThan", "", 3, True),
    ("greaterThan", "", -2, False),
    ("lessThan", "", -2, True),
])
def test_number_blank_filter_value_reads_as_zero(operator, value, cell, expected):
    """A filter value left blank compares against 0 instead of hiding every row."""
    flt = NumberFilter(column_name="n", operator=operator, value=value)
    assert evaluate_predicate(flt, {"n": cell}) is expected


def test_number_blank_filter_value_still_rejects_blank_cells():
    """Blank cells stay missing even when the filter value is blank."""
    flt = NumberFilter(column_name="n", operator="equals", value="")
    assert evaluate_predicate(flt, {"n": ""}) is False
    assert evaluate_predicate(flt, {"n": None}) is False


# --- Tests for Date Predicates ---

@pytest.mark.parametrize("date_from, date_to, cell, expected", [
    ("2024-01-01", None, "2023-12-31", False),
    ("2024-01-01", None, "2024-01-01", True),
    ("2024-01-01", None, "2030-06-15", True),
    (None, "2024-01-31", "2024-01-31", True),
    (None, "2024-01-31", "2024-02-01", False),
    (None, "2024-01-31", "1999-01-01", True),
    ("2024-01-01", "2024-01-31", "2024-01-15", True),
    ("2024-01-01", "2024-01-31", "2024-02-15", False),
    ("2024-01-01", None, datetime(2024, 3, 1, 12, 30), True),
    ("2024-01-01", None, date(2023, 3, 1), False),
])
def test_date_range(date_from, date_to, cell, expected):
    """Both bounds are inclusive and optional."""
    flt = DateFilter(column_name="d", date_from=date_from, date_to=date_to)
    assert evaluate_predicate(flt, {"d": cell}) is expected


def test_date_range_without_bounds_passes_everything():
    """A range with neither bound set is no constraint."""
    flt = DateFilter(column_name="d")
    assert evaluate_predicate(flt, {"d": "not a date"}) is True
    assert evaluate_predicate(flt, {"d": None}) is True


def test_date_invalid_cell_fails_when_bounded():
    """Unparseable or missing dates fall outside any bounded range."""
    flt = DateFilter(column_name="d", date_from="2024-01-01")
    assert evaluate_predicate(flt, {"d": "not a date"}) is False
    assert evaluate_predicate(flt, {"d": None}) is False


def test_date_invalid_bound_fails_every_row():
    """A bound that does not parse compares false against every date."""
    flt = DateFilter(column_name="d", date_from="someday")
    assert evaluate_predicate(flt, {"d": "2024-01-01"}) is False


def test_date_unknown_operator_passes():
    """Only dateRange is evaluated; other operators pass."""
    flt = DateFilter(column_name="d", operator="before", date_from="2024-01-01")
    assert evaluate_predicate(flt, {"d": "2000-01-01"}) is True


def test_date_day_first_setting_applies_to_filters(monkeypatch):
    """Ambiguous dates read day-first when DATE_DAYFIRST is set, as at load time."""
    flt = DateFilter(column_name="d", date_from="05/01/2024")
    assert evaluate_predicate(flt, {"d": "02/03/2024"}) is False

    monkeypatch.setattr(settings, "DATE_DAYFIRST", True)
    assert to_timestamp("05/01/2024") == pd.Timestamp(2024, 1, 5)
    assert evaluate_predicate(flt, {"d": "02/03/2024"}) is True


# --- Tests for Category Predicates ---

def test_category_membership():
    """Category matching is exact and case-sensitive."""
    flt = CategoryFilter(column_name="region", values=["East", "North"])
    assert evaluate_predicate(flt, {"region": "East"}) is True
    assert evaluate_predicate(flt, {"region": "West"}) is False
    assert evaluate_predicate(flt, {"region": "east"}) is False


def test_category_empty_selection_passes():
    """An empty selection does not constrain the column."""
    flt = CategoryFilter(column_name="region", values=[])
    assert evaluate_predicate(flt, {"region": "anything"}) is True
    assert evaluate_predicate(flt, {"region": None}) is True


def test_category_compares_string_form():
    """Numbers are compared by their string form."""
    flt = CategoryFilter(column_name="size", values=[10, "L"])
    assert evaluate_predicate(flt, {"size": 10}) is True
    assert evaluate_predicate(flt, {"size": 10.0}) is True
    assert evaluate_predicate(flt, {"size": "M"}) is False


def test_category_missing_cell_never_matches():
    """A missing cell is not the same as an empty-string category."""
    flt = CategoryFilter(column_name="region", values=[""])
    assert evaluate_predicate(flt, {"region": None}) is False


# --- Tests for Permissive Defaults ---

@pytest.mark.parametrize("flt", [
    TextFilter(column_name="ghost", value="x"),
    NumberFilter(column_name="ghost", operator="greaterThan", value="1"),
    DateFilter(column_name="ghost", date_from="2024-01-01"),
    CategoryFilter(column_name="ghost", values=["a"]),
])
def test_missing_column_passes(flt):
    """A filter on a column the row does not have never hides the row."""
    assert evaluate_predicate(flt, {"region": "East"}) is True


def test_unknown_column_type_passes():
    """Unrecognised column types parse to a filter that passes every row."""
    flt = parse_filter({"columnName": "flag", "columnType": "boolean", "operator": "isTrue"})
    assert isinstance(flt, UnknownFilter)
    assert evaluate_predicate(flt, {"flag": False}) is True
    assert is_interpretable(flt) is False


def test_accepts_row_record():
    """Rows may be passed with their record id attached."""
    flt = TextFilter(column_name="region", value="East")
    assert evaluate_predicate(flt, RowRecord(id="r1", data={"region": "East"})) is True


def test_accepts_raw_payload():
    """A camelCase filter payload is parsed before evaluation."""
    payload = {"columnName": "region", "columnType": "text", "operator": "equals",
               "value": "West", "isActive": True}
    assert evaluate_predicate(payload, {"region": "East"}) is False
    assert evaluate_predicate(payload, {"region": "west"}) is True
    number = {"columnName": "sales", "columnType": "number", "operator": "greaterThan", "value": "4"}
    assert evaluate_predicate(number, {"sales": 3}) is False
