from __future__ import annotations

import json
from pathlib import Path
from typing import Any, get_args

import typer

from bla_dashboard.config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    Grouping,
    Metric,
    SizeCategory,
    load_config,
)
from bla_dashboard.formatting import format_exact_number, format_number, format_percentage
from bla_dashboard.io.loader import DashboardData, SourceLoadError
from bla_dashboard.io.write import write_summary
from bla_dashboard.logging import configure_logging
from bla_dashboard.pipeline.run_all import load_data, run_all
from bla_dashboard.views.overview import OverviewView
from bla_dashboard.views.registry import get_view, view_names

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _load_data_or_exit(cfg: AppConfig) -> DashboardData:
    try:
        return load_data(cfg)
    except SourceLoadError as exc:
        typer.echo(f"Error loading {exc.source_id}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc


def _check_choice(value: str | None, choices: tuple[str, ...], option: str) -> str | None:
    if value is not None and value not in choices:
        raise typer.BadParameter(f"{option} must be one of: {', '.join(choices)}")
    return value


@app.command()
def summary(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print overview metrics and the data summary table."""
    configure_logging()
    cfg = _load_app_config(config)
    data = _load_data_or_exit(cfg)
    result = OverviewView(limits=cfg.limits).compute(data)
    stats = result.statistics
    coverage = format_percentage(stats["acs_covered"], stats["total_acs"])
    typer.echo(f"Total records: {format_exact_number(stats['total_records'])}")
    typer.echo(f"ACs covered: {stats['acs_covered']}/{stats['total_acs']} ({coverage})")
    typer.echo(f"BLA agents: {format_exact_number(stats['total_blas'])}")
    typer.echo(f"Families analyzed: {format_number(stats['total_families'])}")
    typer.echo(result.tables["data_summary"].to_string(index=False))


@app.command()
def view(
    name: str = typer.Argument(..., help="View to compute."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    start_date: str | None = typer.Option(None, help="Inclusive ISO start date."),
    end_date: str | None = typer.Option(None, help="Inclusive ISO end date."),
    ac: str | None = typer.Option(None, help="AC number filter, or 'all'."),
    size_category: str | None = typer.Option(None, help="all, small, normal or large."),
    grouping: str | None = typer.Option(None, help="hourly, daily or by-entity."),
    metric: str | None = typer.Option(None, help="count, average-size or average-duration."),
    out: Path | None = typer.Option(None, resolve_path=True, help="Write the payload here."),
) -> None:
    """Compute one view and print (or write) its chart payloads as JSON."""
    configure_logging()
    cfg = _load_app_config(config)
    if name not in view_names(cfg):
        choices = ", ".join(view_names(cfg))
        raise typer.BadParameter(f"Unknown view '{name}'. Choose from: {choices}")
    changes: dict[str, Any] = {
        "start_date": start_date,
        "end_date": end_date,
        "ac": ac,
        "size_category": _check_choice(size_category, get_args(SizeCategory), "--size-category"),
        "grouping": _check_choice(grouping, get_args(Grouping), "--grouping"),
        "metric": _check_choice(metric, get_args(Metric), "--metric"),
    }
    selected = get_view(cfg, name)
    selected.edit(**{key: value for key, value in changes.items() if value is not None})
    selected.apply()

    data = _load_data_or_exit(cfg)
    result = selected.compute(data)
    payload = {"view": result.view, "series": result.payload(), "statistics": result.statistics}
    if out is None:
        typer.echo(json.dumps(payload, indent=2, default=str))
        return
    write_summary(payload, out)
    typer.echo(f"View {name} written to: {out}")


@app.command("run-all")
def run_all_command(
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Compute every view and write series, tables and figures under out/."""
    configure_logging()
    cfg = _load_app_config(config)
    data = _load_data_or_exit(cfg)
    results = run_all(out_dir=out, config=cfg, data=data)
    typer.echo(f"Run complete. Views: {', '.join(results)}")


if __name__ == "__main__":
    app()
