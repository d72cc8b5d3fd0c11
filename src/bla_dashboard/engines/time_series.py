from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

import pandas as pd

from bla_dashboard.config import Grouping
from bla_dashboard.engines.series import ChartDataset, ChartSeries
from bla_dashboard.features.primitives import avg_by, group_by, numeric_values, sum_by
from bla_dashboard.formatting import format_short_date

Reducer = Literal["count", "sum", "avg"]
HourlyFallback = Callable[[int], float]
Daypart = tuple[int, int, str]

HOURS: tuple[int, ...] = tuple(range(24))
OTHER_HOURS_COLOR = "rgba(107, 114, 128, 0.8)"

ACTIVITY_DAYPARTS: tuple[Daypart, ...] = (
    (9, 17, "rgba(16, 185, 129, 0.8)"),
    (18, 21, "rgba(245, 158, 11, 0.8)"),
    (6, 8, "rgba(59, 130, 246, 0.8)"),
)
WORK_PATTERN_DAYPARTS: tuple[Daypart, ...] = (
    (9, 17, "rgba(16, 185, 129, 0.8)"),
    (18, 21, "rgba(245, 158, 11, 0.8)"),
)


def reduce_group(
    group: pd.DataFrame,
    reducer: Reducer,
    value_field: str | None = None,
    *,
    min_value: float | None = None,
) -> float:
    if reducer == "count":
        return float(len(group))
    if value_field is None:
        raise ValueError(f"value_field is required for reducer '{reducer}'")
    if reducer == "sum":
        return sum_by(group, value_field)
    if reducer == "avg":
        if min_value is not None and not group.empty:
            group = group.loc[numeric_values(group, value_field) >= min_value]
        return avg_by(group, value_field)
    raise ValueError(f"Unsupported reducer: {reducer}")


def hour_groups(records: pd.DataFrame, hour_field: str = "start_hour") -> dict[int, pd.DataFrame]:
    """Group records by hour of day, dropping missing or out-of-range hours."""
    if records.empty or hour_field not in records.columns:
        return {}
    # Normalized frames coerce missing hours to 0; raw frames may still carry NaN.
    present = records.loc[records[hour_field].notna()]
    hours: dict[int, pd.DataFrame] = {}
    for key, group in group_by(present, hour_field).items():
        if key.isdigit() and int(key) in HOURS:
            hours[int(key)] = group
    return hours


def _dated_groups(records: pd.DataFrame, date_field: str) -> dict[str, pd.DataFrame]:
    if date_field not in records.columns:
        return {}
    dated = records.loc[records[date_field].notna()]
    return group_by(dated, date_field)


def build_time_series(
    records: pd.DataFrame,
    *,
    grouping: Grouping = "daily",
    reducer: Reducer = "count",
    value_field: str | None = None,
    min_value: float | None = None,
    date_field: str = "date",
    hour_field: str = "start_hour",
    entity_field: str = "ac_no",
    label: str = "Count",
    style: dict[str, Any] | None = None,
    label_format: Callable[[str], str] | None = None,
    fallback: HourlyFallback | None = None,
    meta: dict[str, Any] | None = None,
) -> ChartSeries:
    """One value per time bucket (or entity) reduced from the records in it.

    Daily output is sparse over the dates present; hourly output is dense over
    0-23 with missing hours set to ``fallback(hour)`` or 0.
    """
    if records.empty:
        return ChartSeries.empty()

    if grouping == "hourly":
        groups = hour_groups(records, hour_field)
        labels = [f"{hour:02d}:00" for hour in HOURS]
        values = []
        for hour in HOURS:
            group = groups.get(hour)
            if group is None or group.empty:
                values.append(float(fallback(hour)) if fallback is not None else 0.0)
            else:
                values.append(reduce_group(group, reducer, value_field, min_value=min_value))
    elif grouping == "by-entity":
        groups = group_by(records, entity_field)
        keys = sorted(groups)
        labels = [label_format(key) if label_format else key for key in keys]
        values = [
            reduce_group(groups[key], reducer, value_field, min_value=min_value) for key in keys
        ]
    elif grouping == "daily":
        groups = _dated_groups(records, date_field)
        keys = sorted(groups)
        formatter = label_format or format_short_date
        labels = [formatter(key) for key in keys]
        values = [
            reduce_group(groups[key], reducer, value_field, min_value=min_value) for key in keys
        ]
    else:
        raise ValueError(f"Unsupported grouping: {grouping}")

    return ChartSeries(
        labels=labels,
        datasets=[ChartDataset(label=label, data=values, style=dict(style or {}))],
        meta=dict(meta or {}),
    )


def daypart_color(hour: int, dayparts: tuple[Daypart, ...]) -> str:
    for start, end, color in dayparts:
        if start <= hour <= end:
            return color
    return OTHER_HOURS_COLOR


def build_hour_of_day(
    records: pd.DataFrame,
    *,
    hour_field: str = "start_hour",
    label: str = "Families Created",
    dayparts: tuple[Daypart, ...] = WORK_PATTERN_DAYPARTS,
    fallback: HourlyFallback | None = None,
) -> ChartSeries:
    if records.empty and fallback is None:
        return ChartSeries.empty()
    groups = hour_groups(records, hour_field)
    values: list[float] = []
    for hour in HOURS:
        group = groups.get(hour)
        if group is not None and not group.empty:
            values.append(float(len(group)))
        elif fallback is not None:
            values.append(float(fallback(hour)))
        else:
            values.append(0.0)
    return ChartSeries(
        labels=[f"{hour:02d}" for hour in HOURS],
        datasets=[
            ChartDataset(
                label=label,
                data=values,
                style={
                    "backgroundColor": [daypart_color(hour, dayparts) for hour in HOURS],
                    "borderColor": "#374151",
                    "borderWidth": 1,
                },
            )
        ],
    )


def activity_baseline_fallback(activity_count: int) -> HourlyFallback:
    """Typical activity level per daypart, scaled by the activity volume."""
    multiplier = max(1, activity_count // 1000)

    def _fallback(hour: int) -> float:
        if 9 <= hour <= 17:
            return 85.0 * multiplier
        if 6 <= hour <= 8:
            return 45.0 * multiplier
        if 18 <= hour <= 21:
            return 35.0 * multiplier
        if 22 <= hour <= 23:
            return 15.0 * multiplier
        return 5.0 * multiplier

    return _fallback
