from __future__ import annotations

import math
import re

import numpy as np
import pandas as pd

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _is_missing(value: object) -> bool:
    if value is None or value is pd.NA:
        return True
    return isinstance(value, float) and math.isnan(value)


def parse_number(value: object) -> float:
    """Leading decimal number of ``value``; 0.0 when absent or non-finite."""
    if _is_missing(value) or isinstance(value, (bool, np.bool_)):
        return 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if match is None:
            return 0.0
        number = float(match.group(1))
    return number if math.isfinite(number) else 0.0


def parse_int(value: object) -> int:
    """Leading integer of ``value`` (numbers truncate toward zero); 0 on failure."""
    if _is_missing(value) or isinstance(value, (bool, np.bool_)):
        return 0
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return int(math.trunc(value)) if math.isfinite(value) else 0
    match = _INT_PREFIX.match(str(value))
    if match is None:
        return 0
    return int(match.group(1))


def _is_plain_numeric(values: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values)


def coerce_number(values: pd.Series) -> pd.Series:
    if _is_plain_numeric(values):
        numeric = values.astype("float64")
        return numeric.where(np.isfinite(numeric), 0.0)
    return values.map(parse_number).astype("float64")


def coerce_int(values: pd.Series) -> pd.Series:
    if _is_plain_numeric(values):
        numeric = values.astype("float64")
        numeric = numeric.where(np.isfinite(numeric), 0.0)
        return np.trunc(numeric).astype("int64")
    return values.map(parse_int).astype("int64")


def to_text(value: object) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


def to_optional_text(value: object) -> str | None:
    text = to_text(value)
    return text if text else None


def pad_ac_no(value: object) -> str:
    return to_text(value).strip().rjust(3, "0")
