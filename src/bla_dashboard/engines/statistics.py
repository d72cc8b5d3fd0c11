from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from bla_dashboard.engines.series import ChartDataset, ChartSeries
from bla_dashboard.engines.time_series import hour_groups
from bla_dashboard.features.primitives import (
    avg_by,
    min_by,
    numeric_values,
    sort_by,
    sum_by,
    unique,
)
from bla_dashboard.formatting import format_count_label, format_duration
from bla_dashboard.io.loader import DashboardData

NOT_AVAILABLE = "N/A"
SUMMARY_COLUMNS = ["analysis_type", "record_count", "coverage", "status"]


def distinct_acs(frames: Iterable[pd.DataFrame], field: str = "ac_no") -> list[str]:
    values: list[str] = []
    for frame in frames:
        if field in frame.columns:
            values.extend(str(value) for value in frame[field] if value)
    return unique(values)


def overview_metrics(data: DashboardData) -> dict[str, int]:
    frames = data.frames()
    return {
        "total_records": sum(len(frame) for frame in frames.values()),
        "total_blas": len(data.bla_performance),
        "total_families": int(sum_by(data.family_size, "total_families")),
        "acs_covered": len(distinct_acs(frames.values())),
    }


def build_coverage_doughnut(activity: pd.DataFrame, *, total_acs: int) -> ChartSeries:
    if activity.empty:
        return ChartSeries.empty()
    covered = len(distinct_acs([activity]))
    return ChartSeries(
        labels=["ACs with Data", "Missing ACs"],
        datasets=[
            ChartDataset(
                label="AC Coverage",
                data=[float(covered), float(max(total_acs - covered, 0))],
                style={
                    "backgroundColor": ["#10b981", "#ef4444"],
                    "borderColor": ["#0f766e", "#b91c1c"],
                    "borderWidth": 2,
                },
            )
        ],
    )


def _date_coverage(activity: pd.DataFrame) -> str:
    if activity.empty:
        return "No data"
    if "date" not in activity.columns:
        return "No dates"
    dates = unique(date for date in activity["date"] if date)
    if not dates:
        return "No dates"
    return f"{len(dates)} Days"


def summary_rows(data: DashboardData, *, total_acs: int) -> pd.DataFrame:
    acs_covered = len(distinct_acs(data.frames().values()))
    rows = [
        ("Family Size Analysis", len(data.family_size), f"{acs_covered}/{total_acs} ACs"),
        ("BLA Daily Activity", len(data.bla_activity), _date_coverage(data.bla_activity)),
        (
            "BLA Performance",
            len(data.bla_performance),
            format_count_label(len(data.bla_performance), "BLAs"),
        ),
        (
            "Timeline Analysis",
            len(data.timeline),
            format_count_label(len(data.timeline), "Records"),
        ),
    ]
    return pd.DataFrame(
        [
            {
                "analysis_type": name,
                "record_count": count,
                "coverage": coverage,
                "status": "Complete",
            }
            for name, count, coverage in rows
        ],
        columns=SUMMARY_COLUMNS,
    )


def family_statistics(records: pd.DataFrame) -> dict[str, float]:
    if records.empty:
        return {
            "total_families": 0.0,
            "avg_family_size": 0.0,
            "small_families": 0.0,
            "large_families": 0.0,
        }
    total_families = sum_by(records, "total_families")
    members = float(
        (numeric_values(records, "family_size") * numeric_values(records, "total_families")).sum()
    )
    small = records.loc[numeric_values(records, "is_small_family") == 1]
    large = records.loc[numeric_values(records, "is_large_family") == 1]
    return {
        "total_families": total_families,
        "avg_family_size": members / total_families if total_families > 0 else 0.0,
        "small_families": sum_by(small, "total_families"),
        "large_families": sum_by(large, "total_families"),
    }


def performance_metrics(records: pd.DataFrame) -> dict[str, Any]:
    if records.empty:
        return {
            "total_blas": 0,
            "avg_families_per_bla": 0.0,
            "avg_duration": 0.0,
            "top_performer": NOT_AVAILABLE,
        }
    leader = sort_by(records, "total_families_created", "desc").iloc[0]
    return {
        "total_blas": len(records),
        "avg_families_per_bla": avg_by(records, "total_families_created"),
        "avg_duration": avg_by(records, "avg_duration_minutes"),
        "top_performer": str(leader.get("bla_name", "") or NOT_AVAILABLE),
    }


def valid_durations(
    records: pd.DataFrame,
    *,
    duration_field: str = "creation_duration_minutes",
    max_minutes: float = 1000.0,
) -> pd.DataFrame:
    """Records whose duration lies in ``[0, max_minutes)``."""
    if records.empty:
        return records
    durations = numeric_values(records, duration_field)
    return records.loc[(durations >= 0) & (durations < max_minutes)]


def peak_hour(records: pd.DataFrame, hour_field: str = "start_hour") -> tuple[int, int] | None:
    """Hour with the most records and its count; ties go to the earliest hour."""
    groups = hour_groups(records, hour_field)
    if not groups:
        return None
    hour = max(sorted(groups), key=lambda candidate: len(groups[candidate]))
    return hour, len(groups[hour])


def timeline_statistics(
    records: pd.DataFrame,
    *,
    duration_field: str = "creation_duration_minutes",
    max_valid_minutes: float = 1000.0,
) -> dict[str, str]:
    if records.empty:
        return {
            "peak_hour": NOT_AVAILABLE,
            "fastest_family": NOT_AVAILABLE,
            "avg_duration": NOT_AVAILABLE,
            "total_hours": NOT_AVAILABLE,
        }
    peak = peak_hour(records)
    valid = valid_durations(records, duration_field=duration_field, max_minutes=max_valid_minutes)
    return {
        "peak_hour": f"{peak[0]}:00 ({peak[1]} families)" if peak else NOT_AVAILABLE,
        "fastest_family": format_duration(min_by(valid, duration_field)),
        "avg_duration": format_duration(avg_by(valid, duration_field)),
        "total_hours": format_duration(sum_by(valid, duration_field)),
    }
