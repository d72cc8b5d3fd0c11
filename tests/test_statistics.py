from __future__ import annotations

import pandas as pd
import pytest

from bla_dashboard.engines.statistics import (
    NOT_AVAILABLE,
    build_coverage_doughnut,
    distinct_acs,
    family_statistics,
    overview_metrics,
    peak_hour,
    performance_metrics,
    summary_rows,
    timeline_statistics,
    valid_durations,
)
from bla_dashboard.io.loader import DashboardData


def test_overview_metrics(dashboard_data: DashboardData) -> None:
    assert overview_metrics(dashboard_data) == {
        "total_records": 18,
        "total_blas": 4,
        "total_families": 18,
        "acs_covered": 2,
    }


def test_distinct_acs_skips_blank_values() -> None:
    frames = [
        pd.DataFrame({"ac_no": ["007", "", "012"]}),
        pd.DataFrame({"ac_no": ["012", None]}),
        pd.DataFrame({"bla_id": ["B1"]}),
    ]

    assert distinct_acs(frames) == ["007", "012"]


def test_coverage_doughnut(dashboard_data: DashboardData) -> None:
    series = build_coverage_doughnut(dashboard_data.bla_activity, total_acs=234)

    assert series.labels == ["ACs with Data", "Missing ACs"]
    assert series.datasets[0].data == [2.0, 232.0]
    assert build_coverage_doughnut(dashboard_data.bla_activity, total_acs=1).datasets[0].data == [
        2.0,
        0.0,
    ]


def test_summary_rows(dashboard_data: DashboardData) -> None:
    table = summary_rows(dashboard_data, total_acs=234)

    assert table["record_count"].tolist() == [4, 6, 4, 4]
    assert table["coverage"].tolist() == ["2/234 ACs", "3 Days", "4 BLAs", "4 Records"]
    assert set(table["status"]) == {"Complete"}


def test_family_statistics(dashboard_data: DashboardData) -> None:
    stats = family_statistics(dashboard_data.family_size)

    assert stats["total_families"] == 18.0
    assert stats["avg_family_size"] == pytest.approx(28 / 18)
    assert stats["small_families"] == 15.0
    assert stats["large_families"] == 1.0
    assert family_statistics(dashboard_data.family_size.iloc[0:0])["avg_family_size"] == 0.0


def test_performance_metrics(dashboard_data: DashboardData) -> None:
    metrics = performance_metrics(dashboard_data.bla_performance)

    assert metrics["total_blas"] == 4
    assert metrics["avg_families_per_bla"] == 127.5
    assert metrics["avg_duration"] == pytest.approx(10.875)
    assert metrics["top_performer"] == "Dan"
    assert performance_metrics(dashboard_data.bla_performance.iloc[0:0])["top_performer"] == (
        NOT_AVAILABLE
    )


def test_valid_durations_and_peak_hour(dashboard_data: DashboardData) -> None:
    valid = valid_durations(dashboard_data.timeline)

    assert valid["family_id"].tolist() == ["F1", "F2"]
    assert peak_hour(dashboard_data.timeline) == (9, 3)
    tied = pd.DataFrame({"start_hour": [14, 9]})
    assert peak_hour(tied) == (9, 1)
    assert peak_hour(tied.iloc[0:0]) is None


def test_timeline_statistics(dashboard_data: DashboardData) -> None:
    assert timeline_statistics(dashboard_data.timeline) == {
        "peak_hour": "9:00 (3 families)",
        "fastest_family": "5m",
        "avg_duration": "10m",
        "total_hours": "20m",
    }
    assert set(timeline_statistics(dashboard_data.timeline.iloc[0:0]).values()) == {
        NOT_AVAILABLE
    }
