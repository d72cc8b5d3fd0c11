from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

from bla_dashboard.config import AppConfig
from bla_dashboard.engines.series import ChartSeries, HeatmapMatrix, ScatterSeries
from bla_dashboard.io.loader import DashboardData, load_dashboard_data
from bla_dashboard.io.write import write_summary, write_table
from bla_dashboard.paths import OutputPaths, build_output_paths
from bla_dashboard.views.base import ViewResult
from bla_dashboard.views.registry import default_views
from bla_dashboard.viz.charts import (
    ChartKind,
    plot_chart_series,
    plot_heatmap_matrix,
    plot_scatter_series,
)
from bla_dashboard.viz.common import figure_path

LOGGER = logging.getLogger(__name__)

CHART_KINDS: dict[tuple[str, str], ChartKind] = {
    ("overview", "coverage"): "doughnut",
    ("overview", "daily_trend"): "line",
    ("family_size", "verification"): "stacked",
    ("bla_activity", "daily_trend"): "line",
    ("bla_activity", "top_blas"): "barh",
    ("timeline", "trend"): "line",
}


def load_data(config: AppConfig) -> DashboardData:
    return load_dashboard_data(config.sources.source_paths())


def compute_views(data: DashboardData, config: AppConfig) -> dict[str, ViewResult]:
    return {view.name: view.compute(data) for view in default_views(config)}


def write_view_outputs(result: ViewResult, paths: OutputPaths, config: AppConfig) -> None:
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    write_summary(result.payload(), paths.series / f"{result.view}.json")
    write_summary(
        {"selection": asdict(result.selection), "statistics": result.statistics},
        paths.summary / f"{result.view}.json",
    )
    for table_name, table in result.tables.items():
        write_table(
            table,
            paths.tables / f"{result.view}__{table_name}.{extension}",
            fmt=config.outputs.tables_format,
        )


def render_view_figures(result: ViewResult, paths: OutputPaths, config: AppConfig) -> list[Path]:
    rendered: list[Path] = []
    for series_name, series in result.series.items():
        output_path = figure_path(
            paths.figures, result.view, series_name, config.outputs.figures_format
        )
        if isinstance(series, HeatmapMatrix):
            written = plot_heatmap_matrix(series, output_path)
        elif isinstance(series, ScatterSeries):
            written = plot_scatter_series(
                series,
                output_path,
                x_label="Families Created",
                y_label="Avg Duration (minutes)",
            )
        elif isinstance(series, ChartSeries):
            written = plot_chart_series(
                series,
                output_path,
                kind=CHART_KINDS.get((result.view, series_name), "bar"),
                title=series.meta.get("chartTitle") or series_name.replace("_", " ").title(),
            )
        else:
            written = None
        if written is not None:
            rendered.append(written)
    return rendered


def run_all(
    out_dir: Path,
    config: AppConfig,
    *,
    data: DashboardData | None = None,
) -> dict[str, ViewResult]:
    """Compute every view and write its series, statistics, tables and figures under ``out_dir``."""
    paths = build_output_paths(out_dir)
    data = data if data is not None else load_data(config)
    results = compute_views(data, config)
    for result in results.values():
        write_view_outputs(result, paths, config)
        if not config.outputs.render_figures:
            continue
        try:
            render_view_figures(result, paths, config)
        except Exception:  # pragma: no cover
            LOGGER.exception("Failed rendering figures for view %s", result.view)
    LOGGER.info("Wrote outputs for %d views to %s", len(results), paths.root)
    return results
