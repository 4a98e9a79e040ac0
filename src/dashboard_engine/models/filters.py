"""
Filter models.

A filter is a closed tagged union over the column type it targets. Each
variant carries only the fields its type needs. Payloads arrive in the
camelCase shape the dashboard UI produces (``columnName``, ``isActive``,
``valueTo``, ``from``, ``to``); snake_case names are accepted as well.

Operators stay plain strings: an operator the engine does not know is kept
and evaluates as "pass", so a stale or malformed filter never hides data.
"""

import uuid
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TextOperator(str, Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class NumberOperator(str, Enum):
    EQUALS = "equals"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    BETWEEN = "between"


class DateOperator(str, Enum):
    DATE_RANGE = "dateRange"


class CategoryOperator(str, Enum):
    IN = "in"


class FilterBase(BaseModel):
    """Fields shared by every filter variant."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    column_name: str = Field(..., min_length=1)
    is_active: bool = True
    operator: str = ""

    @field_validator("operator", mode="before")
    @classmethod
    def operator_as_string(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, Enum):
            return str(v.value)
        return str(v)


class TextFilter(FilterBase):
    column_type: Literal["text"] = "text"
    operator: str = TextOperator.EQUALS.value
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def value_as_string(cls, v: Any) -> str:
        return "" if v is None else str(v)


class NumberFilter(FilterBase):
    column_type: Literal["number"] = "number"
    operator: str = NumberOperator.EQUALS.value
    # Raw values; coerced at evaluation so unparseable input behaves like NaN
    value: Any = ""
    value_to: Any = None


class DateFilter(FilterBase):
    column_type: Literal["date"] = "date"
    operator: str = DateOperator.DATE_RANGE.value
    date_from: Any = Field(None, alias="from")
    date_to: Any = Field(None, alias="to")


class CategoryFilter(FilterBase):
    column_type: Literal["category"] = "category"
    operator: str = CategoryOperator.IN.value
    values: List[str] = Field(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def values_as_strings(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, (str, bytes)):
            return [str(v)]
        return [str(item) for item in v]


class UnknownFilter(FilterBase):
    """A filter for a column type the engine has no predicate for. Always passes."""
    model_config = ConfigDict(extra="allow")

    column_type: str = ""


Filter = Union[TextFilter, NumberFilter, DateFilter, CategoryFilter, UnknownFilter]

FILTER_TYPES: Dict[str, Type[FilterBase]] = {
    "text": TextFilter,
    "number": NumberFilter,
    "date": DateFilter,
    "category": CategoryFilter,
}


def parse_filter(payload: Union[Dict[str, Any], FilterBase]) -> Filter:
    """
    Build the filter variant matching the payload's column type.

    Raises pydantic.ValidationError when a required field (``columnName``)
    is missing; an unrecognised column type yields an UnknownFilter.
    """
    if isinstance(payload, FilterBase):
        return payload
    column_type = payload.get("columnType", payload.get("column_type"))
    if isinstance(column_type, Enum):
        column_type = column_type.value
    model = FILTER_TYPES.get(column_type)
    if model is None:
        return UnknownFilter.model_validate({**payload, "columnType": str(column_type or "")})
    return model.model_validate(payload)


def parse_filters(payloads: Iterable[Union[Dict[str, Any], FilterBase]]) -> List[Filter]:
    return [parse_filter(p) for p in payloads]
