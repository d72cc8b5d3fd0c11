from __future__ import annotations

import pandas as pd


def filter_date_range(
    records: pd.DataFrame,
    start_date: str | None,
    end_date: str | None,
    *,
    field: str = "date",
) -> pd.DataFrame:
    """Keep records whose ISO date lies in [start_date, end_date].

    ISO dates compare correctly as strings. Either bound missing disables the
    filter; inverted bounds are not validated and produce an empty frame.
    """
    if not start_date or not end_date:
        return records
    if field not in records.columns:
        return records.iloc[0:0]
    dates = records[field]
    present = dates.notna()
    text = dates.where(present, "").astype(str)
    mask = present & (text >= start_date) & (text <= end_date)
    return records.loc[mask]


def filter_equals(records: pd.DataFrame, field: str, value: object) -> pd.DataFrame:
    if field not in records.columns:
        return records.iloc[0:0]
    return records.loc[records[field] == value]


def filter_between(
    records: pd.DataFrame,
    field: str,
    low: float,
    high: float,
) -> pd.DataFrame:
    if field not in records.columns:
        return records.iloc[0:0]
    return records.loc[records[field].between(low, high)]
