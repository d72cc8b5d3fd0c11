from __future__ import annotations

from pathlib import Path

import pandas as pd


def _clean_cell(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def read_tabular_source(path: Path) -> pd.DataFrame:
    """Read a header-labelled CSV into loosely typed rows.

    Headers and cells are trimmed, blank cells become None and blank lines are
    skipped. Cells stay text; typing is left to the normalizer.
    """
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    raw = pd.read_csv(
        path,
        dtype=str,
        encoding="utf-8-sig",
        skip_blank_lines=True,
        keep_default_na=False,
        na_values=[""],
    )
    cleaned = {
        str(column).strip(): raw[column].astype(object).map(_clean_cell).astype(object)
        for column in raw.columns
    }
    return pd.DataFrame(cleaned, index=raw.index)
