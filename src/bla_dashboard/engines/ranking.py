from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pandas as pd

from bla_dashboard.engines.series import ChartDataset, ChartSeries
from bla_dashboard.features.primitives import Accessor, group_by, sort_by, sum_by, unique
from bla_dashboard.formatting import truncate_label

GroupMetric = Callable[[pd.DataFrame], float]

DEFAULT_TOP_N = 20


def total_of(field: str) -> GroupMetric:
    def _metric(group: pd.DataFrame) -> float:
        return sum_by(group, field)

    return _metric


def daily_average(field: str, date_field: str = "date") -> GroupMetric:
    """Total of ``field`` divided by the number of distinct dates the group appears on."""

    def _metric(group: pd.DataFrame) -> float:
        if date_field not in group.columns:
            return 0.0
        days = len(unique(date for date in group[date_field] if pd.notna(date)))
        return sum_by(group, field) / days if days > 0 else 0.0

    return _metric


def rank_entities(
    records: pd.DataFrame,
    *,
    entity_key: Accessor,
    metric: GroupMetric,
    name_field: str | None = None,
    top_n: int = DEFAULT_TOP_N,
) -> pd.DataFrame:
    """Per-entity metric, sorted descending (stable) and cut to ``top_n`` rows."""
    columns = ["entity", "name", "metric"]
    if records.empty:
        return pd.DataFrame(columns=columns)
    rows = []
    for entity, group in group_by(records, entity_key).items():
        name = entity
        if name_field is not None and name_field in group.columns:
            name = str(group[name_field].iloc[0] or "Unknown")
        rows.append({"entity": entity, "name": name, "metric": float(metric(group))})
    ranked = sort_by(pd.DataFrame(rows, columns=columns), "metric", "desc")
    return ranked.head(top_n).reset_index(drop=True)


def build_top_n_ranked(
    records: pd.DataFrame,
    *,
    entity_key: Accessor,
    metric: GroupMetric,
    label: str,
    name_field: str | None = None,
    top_n: int = DEFAULT_TOP_N,
    label_format: Callable[[str], str] | None = None,
    label_max_chars: int | None = None,
    style: dict[str, Any] | None = None,
) -> ChartSeries:
    ranked = rank_entities(
        records,
        entity_key=entity_key,
        metric=metric,
        name_field=name_field,
        top_n=top_n,
    )
    if ranked.empty:
        return ChartSeries.empty()
    labels = []
    for name in ranked["name"]:
        text = label_format(name) if label_format else name
        if label_max_chars is not None:
            text = truncate_label(text, label_max_chars)
        labels.append(text)
    return ChartSeries(
        labels=labels,
        datasets=[
            ChartDataset(
                label=label,
                data=ranked["metric"].astype(float).tolist(),
                style=dict(style or {}),
            )
        ],
    )


def top_records(
    records: pd.DataFrame,
    key: Accessor,
    *,
    top_n: int = DEFAULT_TOP_N,
) -> pd.DataFrame:
    return sort_by(records, key, "desc").head(top_n).reset_index(drop=True)
