from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Literal, TypeVar

import numpy as np
import pandas as pd

from bla_dashboard.preprocess.coerce import coerce_number

Accessor = str | Callable[[pd.DataFrame], pd.Series]
SortOrder = Literal["asc", "desc"]

UNDEFINED_KEY = "undefined"
NULL_KEY = "null"

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


def key_values(records: pd.DataFrame, key: Accessor) -> pd.Series:
    """Resolve ``key`` to one value per record; a missing column yields all None."""
    if callable(key):
        values = key(records)
        if not isinstance(values, pd.Series):
            values = pd.Series(list(values), index=records.index, dtype=object)
        return values
    if key in records.columns:
        return records[key]
    return pd.Series([None] * len(records), index=records.index, dtype=object)


def key_string(value: object) -> str:
    if value is None or value is pd.NA:
        return NULL_KEY
    if isinstance(value, (float, np.floating)):
        if np.isnan(value):
            return NULL_KEY
        if float(value).is_integer():
            return str(int(value))
    if isinstance(value, np.integer):
        return str(int(value))
    return str(value)


def group_keys(records: pd.DataFrame, key: Accessor) -> pd.Series:
    if isinstance(key, str) and key not in records.columns:
        return pd.Series([UNDEFINED_KEY] * len(records), index=records.index, dtype=object)
    return key_values(records, key).map(key_string).astype(object)


def group_by(records: pd.DataFrame, key: Accessor) -> dict[str, pd.DataFrame]:
    """Partition records by the string form of ``key``, in first-occurrence order."""
    if records.empty:
        return {}
    keys = group_keys(records, key)
    return {
        str(group_key): group
        for group_key, group in records.groupby(keys, sort=False, dropna=False)
    }


def numeric_values(records: pd.DataFrame, key: Accessor) -> pd.Series:
    return coerce_number(key_values(records, key))


def sum_by(records: pd.DataFrame, key: Accessor) -> float:
    if records.empty:
        return 0.0
    return float(numeric_values(records, key).sum())


def avg_by(records: pd.DataFrame, key: Accessor) -> float:
    if records.empty:
        return 0.0
    return sum_by(records, key) / len(records)


def max_by(records: pd.DataFrame, key: Accessor) -> float:
    if records.empty:
        return 0.0
    return float(numeric_values(records, key).max())


def min_by(records: pd.DataFrame, key: Accessor) -> float:
    if records.empty:
        return 0.0
    return float(numeric_values(records, key).min())


def sort_by(records: pd.DataFrame, key: Accessor, order: SortOrder = "asc") -> pd.DataFrame:
    if order not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort order: {order}")
    if records.empty:
        return records.copy()
    values = numeric_values(records, key).to_numpy(dtype=float)
    if order == "desc":
        values = -values
    positions = np.argsort(values, kind="stable")
    return records.iloc[positions].copy()


def unique(values: Iterable[H]) -> list[H]:
    return list(dict.fromkeys(values))


def chunk(records: pd.DataFrame | Sequence[T], size: int) -> list:
    if size < 1:
        raise ValueError("size must be >= 1")
    if isinstance(records, pd.DataFrame):
        return [records.iloc[start : start + size] for start in range(0, len(records), size)]
    return [records[start : start + size] for start in range(0, len(records), size)]
