"""Dataset, column and row models."""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ColumnType(str, Enum):
    """Semantic type of a column; decides which filters and KPIs apply."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CATEGORY = "category"


class Column(BaseModel):
    """Represents metadata for a single column."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Column name, unique within the dataset")
    type: ColumnType = Field(ColumnType.TEXT, description="Semantic column type")


class RowRecord(BaseModel):
    """A row together with the identifier of the record it came from."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    data: Dict[str, Any] = Field(default_factory=dict)


class Dataset(BaseModel):
    """
    Represents an uploaded table: ordered columns and ordered rows.
    The engine only ever reads it.
    """
    name: str = "Untitled"
    file_name: Optional[str] = None
    columns: List[Column] = Field(default_factory=list)
    rows: List[RowRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_columns(self) -> "Dataset":
        seen = set()
        for col in self.columns:
            if col.name in seen:
                raise ValueError(f"Duplicate column name: {col.name!r}")
            seen.add(col.name)
        return self

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> Optional[Column]:
        return next((c for c in self.columns if c.name == name), None)

    def columns_of_type(self, *types: ColumnType) -> List[Column]:
        return [c for c in self.columns if c.type in types]

    @property
    def row_count(self) -> int:
        return len(self.rows)
