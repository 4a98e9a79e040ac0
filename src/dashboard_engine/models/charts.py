"""Chart series and report preset models."""

from pydantic import BaseModel, Field


class SeriesPoint(BaseModel):
    """One bar/slice/point of a chart series."""
    name: str = Field(..., description="Group key")
    value: float = Field(0.0, description="Reduced value")


class ReportPreset(BaseModel):
    """A ready-made group-by/value pairing offered to the user."""
    value: str
    label: str
    group_by: str = ""
    value_column: str = ""
