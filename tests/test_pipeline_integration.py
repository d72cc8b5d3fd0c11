from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from bla_dashboard.config import AppConfig, OutputsConfig, SourcesConfig
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.pipeline.run_all import compute_views, run_all


def test_run_all_writes_series_summaries_and_tables(tmp_path: Path, data_dir: Path) -> None:
    config = AppConfig(
        sources=SourcesConfig(data_dir=str(data_dir)),
        outputs=OutputsConfig(render_figures=False),
    )
    out_dir = tmp_path / "out"

    results = run_all(out_dir, config)

    assert list(results) == [
        "overview",
        "family_size",
        "bla_activity",
        "bla_performance",
        "timeline",
    ]
    series = json.loads((out_dir / "series" / "bla_activity.json").read_text(encoding="utf-8"))
    assert set(series) == {"daily_trend", "hourly_pattern", "top_blas", "heatmap"}
    assert series["heatmap"]["acs"] == ["007", "012"]
    summary = json.loads((out_dir / "summary" / "timeline.json").read_text(encoding="utf-8"))
    assert summary["selection"]["grouping"] == "daily"
    assert summary["statistics"]["avg_duration"] == "10m"
    table = pd.read_csv(out_dir / "tables" / "overview__data_summary.csv")
    assert table["record_count"].tolist() == [4, 6, 4, 4]
    assert not any((out_dir / "figures").iterdir())


def test_run_all_renders_figures(tmp_path: Path, dashboard_data: DashboardData) -> None:
    out_dir = tmp_path / "out"

    run_all(out_dir, AppConfig(), data=dashboard_data)

    figures = out_dir / "figures"
    assert (figures / "overview" / "coverage.png").exists()
    assert (figures / "bla_activity" / "heatmap.png").exists()
    assert (figures / "bla_performance" / "efficiency.png").exists()
    assert (figures / "timeline" / "duration_by_size.png").exists()


def test_compute_views_uses_config_selections(dashboard_data: DashboardData) -> None:
    config = AppConfig.model_validate(
        {"views": {"timeline": {"grouping": "hourly", "metric": "average-size"}}}
    )

    results = compute_views(dashboard_data, config)

    trend = results["timeline"].series["trend"]
    assert len(trend.labels) == 24
    assert trend.meta["chartTitle"] == "Hourly Average Family Size"
