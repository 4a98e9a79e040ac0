import pytest

from dashboard_engine.models import Column, ColumnType, Dataset, RowRecord


@pytest.fixture
def sales_rows():
    """Three rows used throughout the scenarios."""
    return [
        {"region": "East", "sales": 10},
        {"region": "West", "sales": 5},
        {"region": "East", "sales": 3},
    ]


@pytest.fixture
def orders_columns():
    return [
        Column(name="order_date", type=ColumnType.DATE),
        Column(name="customer", type=ColumnType.TEXT),
        Column(name="product", type=ColumnType.CATEGORY),
        Column(name="quantity", type=ColumnType.NUMBER),
        Column(name="total_amount", type=ColumnType.NUMBER),
    ]


@pytest.fixture
def orders_rows():
    return [
        {"order_date": "2024-01-01", "customer": "Ann", "product": "Tea", "quantity": 2, "total_amount": 100},
        {"order_date": "2024-01-01", "customer": "Bob", "product": "Coffee", "quantity": 1, "total_amount": 50},
        {"order_date": "2024-01-03", "customer": "Ann", "product": "Tea", "quantity": "x", "total_amount": None},
        {"order_date": "2024-01-05", "customer": None, "product": "Cake", "quantity": 4, "total_amount": "200"},
    ]


@pytest.fixture
def orders_dataset(orders_columns, orders_rows):
    return Dataset(
        name="orders",
        file_name="orders.csv",
        columns=orders_columns,
        rows=[RowRecord(id=f"row-{i}", data=row) for i, row in enumerate(orders_rows)],
    )
