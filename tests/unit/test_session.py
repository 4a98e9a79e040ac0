import pytest

from dashboard_engine.core.session import DashboardSession
from dashboard_engine.models import Dataset, NumberFilter, TextFilter
from dashboard_engine.utils.exceptions import UnknownFilterError


# --- Tests for Filter Editing ---

def test_add_update_remove_filter(orders_dataset):
    """Filters can be added, edited and removed by id."""
    session = DashboardSession(orders_dataset)
    assert len(session.filtered_rows) == 4

    flt = session.add_filter({"columnName": "customer", "columnType": "text",
                              "operator": "equals", "value": "ann", "isActive": True})
    assert session.filtered_row_ids == ["row-0", "row-2"]

    session.update_filter(flt.id, is_active=False)
    assert len(session.filtered_rows) == 4
    assert session.active_filter_count() == 0

    session.update_filter(flt.id, isActive=True, value="bob")
    assert session.filtered_row_ids == ["row-1"]

    session.remove_filter(flt.id)
    assert session.filters == []
    assert len(session.filtered_rows) == 4


def test_update_can_change_filter_type(orders_dataset):
    """Changing the column type re-parses the filter."""
    session = DashboardSession(orders_dataset)
    flt = session.add_filter(TextFilter(column_name="quantity", value="2"))
    updated = session.update_filter(flt.id, column_type="number", operator="greaterThan", value="1")
    assert isinstance(updated, NumberFilter)
    assert updated.id == flt.id
    assert session.filtered_row_ids == ["row-0", "row-3"]


def test_clear_filters(orders_dataset):
    """Clearing removes every filter."""
    session = DashboardSession(orders_dataset)
    session.add_filter(TextFilter(column_name="customer", value="nobody"))
    assert session.filtered_rows == []
    session.clear_filters()
    assert len(session.filtered_rows) == 4


def test_unknown_filter_id_raises(orders_dataset):
    """Editing an unknown filter id raises."""
    session = DashboardSession(orders_dataset)
    with pytest.raises(UnknownFilterError):
        session.remove_filter("missing")
    with pytest.raises(UnknownFilterError):
        session.update_filter("missing", value="x")


# --- Tests for Derived Views ---

def test_results_are_cached_until_a_change(orders_dataset):
    """Derived views are reused until the revision changes."""
    session = DashboardSession(orders_dataset)
    first = session.filtered_records
    assert session.filtered_records is first
    assert session.kpis is session.kpis

    revision = session.revision
    session.add_filter(TextFilter(column_name="customer", value="Ann"))
    assert session.revision == revision + 1
    assert session.filtered_records is not first


def test_kpis_follow_filters(orders_dataset):
    """KPIs are computed over the filtered rows."""
    session = DashboardSession(orders_dataset)
    assert session.kpis.total_revenue == 350

    session.add_filter({"columnName": "product", "columnType": "category", "values": ["Tea"]})
    assert session.kpis.total_revenue == 100
    assert session.kpis.row_count == 2


def test_kpis_absent_when_nothing_passes(orders_dataset):
    """No KPIs when every row is filtered out."""
    session = DashboardSession(orders_dataset)
    session.add_filter(TextFilter(column_name="customer", value="nobody"))
    assert session.kpis is None


def test_chart_series_and_time_series(orders_dataset):
    """Series and time series come from the filtered rows."""
    session = DashboardSession(orders_dataset)
    series = session.chart_series("product", "total_amount")
    assert [(p.name, p.value) for p in series] == [("Tea", 100), ("Coffee", 50), ("Cake", 200)]
    assert [p.name for p in session.time_series("total_amount")] == ["Jan 1", "Jan 3", "Jan 5"]


def test_time_series_without_date_column(sales_rows):
    """No date column means an empty time series."""
    dataset = Dataset(columns=[{"name": "region", "type": "text"}, {"name": "sales", "type": "number"}],
                      rows=[{"data": r} for r in sales_rows])
    assert DashboardSession(dataset).time_series("sales") == []


def test_set_dataset_recomputes(orders_dataset):
    """Swapping the dataset invalidates cached views."""
    session = DashboardSession(orders_dataset)
    assert len(session.filtered_rows) == 4
    session.set_dataset(Dataset(columns=orders_dataset.columns, rows=orders_dataset.rows[:1]))
    assert len(session.filtered_rows) == 1


def test_export_filtered_rows(orders_dataset):
    """Export contains only the filtered rows."""
    session = DashboardSession(orders_dataset)
    session.add_filter(TextFilter(column_name="customer", value="Bob"))
    lines = session.export_csv().splitlines()
    assert lines[0] == "order_date,customer,product,quantity,total_amount"
    assert lines[1:] == ["2024-01-01,Bob,Coffee,1,50"]
