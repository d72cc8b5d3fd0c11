from __future__ import annotations

import pandas as pd

from bla_dashboard.io.schema import DatasetSchema, schema_for
from bla_dashboard.preprocess.coerce import (
    coerce_int,
    coerce_number,
    pad_ac_no,
    to_optional_text,
    to_text,
)


def _column_or_missing(df: pd.DataFrame, column: str) -> pd.Series:
    if column in df.columns:
        return df[column]
    return pd.Series([None] * len(df), index=df.index, dtype=object)


def normalize_with_schema(df: pd.DataFrame, schema: DatasetSchema) -> pd.DataFrame:
    """Coerce raw rows to the typed columns of ``schema``.

    Every field has a fallback (0, 0.0, "" or None), so malformed cells degrade
    instead of raising. Source columns outside the schema are kept after the
    schema columns.
    """
    working = df.reset_index(drop=True)
    typed: dict[str, pd.Series] = {}
    for column in schema.ac_fields:
        typed[column] = _column_or_missing(working, column).map(pad_ac_no).astype(object)
    for column in schema.string_fields:
        typed[column] = _column_or_missing(working, column).map(to_text).astype(object)
    for column in schema.int_fields:
        typed[column] = coerce_int(_column_or_missing(working, column))
    for column in schema.float_fields:
        typed[column] = coerce_number(_column_or_missing(working, column))
    for column in schema.date_fields:
        typed[column] = _column_or_missing(working, column).map(to_optional_text).astype(object)

    normalized = pd.DataFrame(
        {column: typed[column] for column in schema.column_order},
        index=working.index,
    )
    extras = [column for column in working.columns if column not in typed]
    if extras:
        normalized = pd.concat([normalized, working[extras]], axis=1)
    return normalized


def normalize_records(df: pd.DataFrame, kind: str) -> pd.DataFrame:
    return normalize_with_schema(df, schema_for(kind))
