"""KPI models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class KpiRole(str, Enum):
    REVENUE = "revenue"
    QUANTITY = "quantity"
    DATE = "date"
    CATEGORY = "category"


class KpiColumnSet(BaseModel):
    """Columns picked for each KPI role. A role may be absent."""
    revenue_column: Optional[str] = None
    quantity_column: Optional[str] = None
    date_column: Optional[str] = None
    category_column: Optional[str] = None

    def column_for(self, role: KpiRole) -> Optional[str]:
        return getattr(self, f"{KpiRole(role).value}_column")

    def is_empty(self) -> bool:
        return not any((self.revenue_column, self.quantity_column,
                        self.date_column, self.category_column))


class DateTrend(BaseModel):
    """Movement of the tracked measure between the earliest and latest day."""
    start: datetime
    end: datetime
    span_days: int = Field(0, ge=0)
    first_value: float = 0.0
    last_value: float = 0.0
    delta: float = 0.0
    delta_percent: Optional[float] = None


class KpiSummary(BaseModel):
    """
    Summary statistics over the filtered rows.
    Fields for roles without a column stay None.
    """
    row_count: int = 0
    total_revenue: Optional[float] = None
    average_revenue: Optional[float] = None
    total_quantity: Optional[float] = None
    average_quantity: Optional[float] = None
    category_count: Optional[int] = None
    top_category: Optional[str] = None
    trend: Optional[DateTrend] = None
