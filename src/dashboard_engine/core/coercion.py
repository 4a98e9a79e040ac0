"""
Scalar coercions shared by the predicate, aggregation and KPI code.

Cells come from spreadsheets, so a column typed ``number`` may still hold
strings, blanks or pandas missing markers. Every helper here is total:
it returns NaN / None / "" instead of raising.
"""

import math
import numbers
import warnings
from decimal import Decimal
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Optional

import numpy as np
import pandas as pd

from dashboard_engine.config import settings

NAN = float("nan")


def is_missing(value: Any) -> bool:
    """True for None and pandas/numpy missing markers (NaN, NaT, NA)."""
    if value is None:
        return True
    if pd.api.types.is_scalar(value):
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            return False
    return False


def to_number(value: Any) -> float:
    """
    Coerce a cell to float. Missing, blank and unparseable values give NaN,
    so every comparison against them is False.
    """
    if is_missing(value):
        return NAN
    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0
    if isinstance(value, (numbers.Real, Decimal)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return NAN
        try:
            return float(text)
        except ValueError:
            return NAN
    return NAN


def to_text(value: Any) -> str:
    """String form of a cell as used for text matching and group keys."""
    if is_missing(value):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        number = float(value)
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return repr(number)
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0) \
                and value.tzinfo is None:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@lru_cache(maxsize=4096)
def _parse_date_text(text: str, dayfirst: bool) -> Optional[pd.Timestamp]:
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            ts = pd.to_datetime(text, errors="coerce", dayfirst=dayfirst)
    except (ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return _naive(ts)


def _naive(ts: pd.Timestamp) -> pd.Timestamp:
    if ts.tzinfo is not None:
        return ts.tz_convert("UTC").tz_localize(None)
    return ts


def to_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Coerce a cell to a naive pandas Timestamp (aware values are converted to
    UTC). Returns None for missing or unparseable values.
    """
    if is_missing(value) or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (datetime, date, np.datetime64)):
        try:
            return _naive(pd.Timestamp(value))
        except (ValueError, OverflowError):
            return None
    text = to_text(value).strip()
    if not text:
        return None
    # Same day/month order as ingestion
    return _parse_date_text(text, settings.DATE_DAYFIRST)
