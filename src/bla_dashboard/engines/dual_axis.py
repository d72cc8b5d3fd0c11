from __future__ import annotations

from typing import Any

import pandas as pd

from bla_dashboard.engines.series import ChartDataset, ChartSeries
from bla_dashboard.features.primitives import avg_by, group_by, numeric_values
from bla_dashboard.preprocess.coerce import parse_int

BAR_STYLE: dict[str, Any] = {
    "backgroundColor": "rgba(37, 99, 235, 0.7)",
    "borderColor": "#2563eb",
    "borderWidth": 2,
}
LINE_STYLE: dict[str, Any] = {
    "type": "line",
    "backgroundColor": "rgba(245, 158, 11, 0.3)",
    "borderColor": "#f59e0b",
    "borderWidth": 3,
    "fill": False,
    "tension": 0.4,
}


def build_dual_axis(
    labels: list[str],
    *,
    bar_label: str,
    bar_values: list[float],
    line_label: str,
    line_values: list[float],
    bar_style: dict[str, Any] | None = None,
    line_style: dict[str, Any] | None = None,
) -> ChartSeries:
    """Bar series on axis ``y`` and line series on axis ``y1`` over the same labels."""
    if len(bar_values) != len(labels) or len(line_values) != len(labels):
        raise ValueError("Dual-axis series must share the category axis length")
    if not labels:
        return ChartSeries.empty()
    return ChartSeries(
        labels=list(labels),
        datasets=[
            ChartDataset(
                label=bar_label,
                data=[float(value) for value in bar_values],
                style={**BAR_STYLE, **(bar_style or {}), "yAxisID": "y"},
            ),
            ChartDataset(
                label=line_label,
                data=[float(value) for value in line_values],
                style={**LINE_STYLE, **(line_style or {}), "yAxisID": "y1"},
            ),
        ],
    )


def member_label(size: int) -> str:
    return f"{size} member{'s' if size > 1 else ''}"


def build_duration_by_category(
    records: pd.DataFrame,
    *,
    category_field: str = "family_size",
    duration_field: str = "creation_duration_minutes",
    max_categories: int = 10,
    min_duration: float = 0.0,
    duration_label: str = "Average Duration",
    count_label: str = "Family Count",
) -> ChartSeries:
    """Average valid duration (bars) and record count (line) per positive numeric category."""
    if records.empty:
        return ChartSeries.empty()
    groups = group_by(records, category_field)
    categories = sorted(
        {parse_int(key): key for key in groups if key.isdigit() and parse_int(key) > 0}.items()
    )[:max_categories]

    labels: list[str] = []
    durations: list[float] = []
    counts: list[float] = []
    for size, key in categories:
        group = groups[key]
        valid = group.loc[numeric_values(group, duration_field) >= min_duration]
        labels.append(member_label(size))
        durations.append(avg_by(valid, duration_field))
        counts.append(float(len(group)))

    return build_dual_axis(
        labels,
        bar_label=duration_label,
        bar_values=durations,
        line_label=count_label,
        line_values=counts,
        bar_style={"backgroundColor": "rgba(16, 185, 129, 0.7)", "borderColor": "#10b981"},
    )
