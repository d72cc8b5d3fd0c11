from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

import matplotlib.pyplot as plt
import numpy as np

from bla_dashboard.engines.series import ChartSeries, HeatmapMatrix, ScatterSeries
from bla_dashboard.viz.common import save_figure

ChartKind = Literal["bar", "barh", "stacked", "line", "doughnut"]

DEFAULT_COLOR = "#2563eb"
_CSS_RGB = re.compile(r"^rgba?\(([^)]*)\)$")


def css_color(value: str) -> str | tuple[float, ...]:
    """Translate ``rgb()``/``rgba()`` strings into matplotlib RGBA tuples."""
    match = _CSS_RGB.match(value.strip())
    if match is None:
        return value
    parts = [float(part) for part in match.group(1).split(",")]
    rgb = tuple(channel / 255.0 for channel in parts[:3])
    alpha = parts[3] if len(parts) > 3 else 1.0
    return (*rgb, alpha)


def _color(style: dict, key: str = "borderColor") -> str | tuple[float, ...] | list:
    value = style.get(key) or style.get("backgroundColor") or DEFAULT_COLOR
    if isinstance(value, list):
        return [css_color(item) for item in value]
    return css_color(value)


def _line_color(style: dict) -> str | tuple[float, ...]:
    value = _color(style)
    return DEFAULT_COLOR if isinstance(value, list) else value


def _is_dual_axis(series: ChartSeries) -> bool:
    return any(dataset.style.get("yAxisID") == "y1" for dataset in series.datasets)


def plot_chart_series(
    series: ChartSeries,
    output_path: Path,
    *,
    kind: ChartKind = "bar",
    title: str | None = None,
    x_label: str | None = None,
    y_label: str | None = None,
) -> Path | None:
    """Render a named-series payload; dual-axis payloads get a secondary line axis."""
    if series.is_empty:
        return None
    title = title or series.meta.get("chartTitle")
    y_label = y_label or series.meta.get("yAxisLabel")
    positions = np.arange(len(series.labels))

    if kind == "doughnut":
        dataset = series.datasets[0]
        colors = dataset.style.get("backgroundColor")
        plt.figure(figsize=(6, 6))
        plt.pie(
            dataset.data,
            labels=series.labels,
            colors=[css_color(color) for color in colors] if isinstance(colors, list) else None,
            wedgeprops={"width": 0.4},
        )
        if title:
            plt.title(title)
        return save_figure(output_path)

    fig, ax = plt.subplots(figsize=(max(8.0, min(16.0, 0.5 * len(series.labels))), 4.5))
    if _is_dual_axis(series):
        secondary = ax.twinx()
        for dataset in series.datasets:
            if dataset.style.get("yAxisID") == "y1":
                secondary.plot(
                    positions,
                    dataset.data,
                    color=_line_color(dataset.style),
                    marker="o",
                    linewidth=2,
                    label=dataset.label,
                )
                secondary.set_ylabel(dataset.label)
            else:
                ax.bar(positions, dataset.data, color=_color(dataset.style, "backgroundColor"))
                ax.set_ylabel(dataset.label)
    elif kind == "barh":
        dataset = series.datasets[0]
        ax.barh(positions, dataset.data, color=_color(dataset.style, "backgroundColor"))
        ax.set_yticks(positions)
        ax.set_yticklabels(series.labels)
        ax.invert_yaxis()
    elif kind == "stacked":
        bottom = np.zeros(len(series.labels))
        for dataset in series.datasets:
            values = np.asarray(dataset.data, dtype=float)
            ax.bar(
                positions,
                values,
                bottom=bottom,
                color=_color(dataset.style, "backgroundColor"),
                label=dataset.label,
            )
            bottom = bottom + values
        ax.legend()
    elif kind == "line":
        for dataset in series.datasets:
            ax.plot(
                positions,
                dataset.data,
                color=_line_color(dataset.style),
                marker="o",
                linewidth=2,
                label=dataset.label,
            )
            if dataset.style.get("fill"):
                ax.fill_between(
                    positions, dataset.data, alpha=0.15, color=_line_color(dataset.style)
                )
    else:
        width = 0.8 / len(series.datasets)
        for index, dataset in enumerate(series.datasets):
            ax.bar(
                positions + index * width - 0.4 + width / 2,
                dataset.data,
                width=width,
                color=_color(dataset.style, "backgroundColor"),
                label=dataset.label,
            )
        if len(series.datasets) > 1:
            ax.legend()

    if kind != "barh":
        ax.set_xticks(positions)
        ax.set_xticklabels(series.labels, rotation=45, ha="right")
    if title:
        ax.set_title(title)
    if x_label:
        ax.set_xlabel(x_label)
    if y_label and not _is_dual_axis(series):
        ax.set_ylabel(y_label)
    return save_figure(output_path)


def heatmap_values(matrix: HeatmapMatrix) -> np.ndarray:
    """Dense entities x dates array built from the matrix cells."""
    values = np.zeros((len(matrix.entities), len(matrix.dates)), dtype=float)
    for cell in matrix.cells:
        values[cell.y, cell.x] = cell.value
    return values


def plot_heatmap_matrix(
    matrix: HeatmapMatrix,
    output_path: Path,
    *,
    title: str = "Activity by AC and date",
) -> Path | None:
    if matrix.is_empty:
        return None
    fig_height = max(4.0, min(12.0, 0.35 * len(matrix.entities)))
    plt.figure(figsize=(max(8.0, 0.6 * len(matrix.dates)), fig_height))
    image = plt.imshow(heatmap_values(matrix), aspect="auto", cmap="YlGnBu")
    plt.colorbar(image, label="Total")
    plt.xticks(range(len(matrix.dates)), matrix.dates, rotation=45, ha="right")
    plt.yticks(range(len(matrix.entities)), [f"AC {entity}" for entity in matrix.entities])
    plt.title(title)
    return save_figure(output_path)


def plot_scatter_series(
    series: ScatterSeries,
    output_path: Path,
    *,
    title: str | None = None,
    x_label: str = "x",
    y_label: str = "y",
) -> Path | None:
    if series.is_empty:
        return None
    plt.figure(figsize=(9, 5))
    plt.scatter(
        [point.x for point in series.points],
        [point.y for point in series.points],
        s=16,
        alpha=0.6,
        color=css_color(series.style.get("borderColor", DEFAULT_COLOR)),
    )
    plt.title(title or series.label)
    plt.xlabel(x_label)
    plt.ylabel(y_label)
    return save_figure(output_path)
