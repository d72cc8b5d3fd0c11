from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from bla_dashboard.cli import app


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "summary" in result.stdout
    assert "view" in result.stdout
    assert "run-all" in result.stdout


def test_summary_prints_overview_metrics(config_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["summary", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "Total records: 18" in result.stdout
    assert "ACs covered: 2/234" in result.stdout
    assert "BLA agents: 4" in result.stdout
    assert "2/234 ACs" in result.stdout


def test_view_prints_json_payload(config_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["view", "timeline", "--config", str(config_path), "--grouping", "by-entity"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout[result.stdout.index("{") :])
    assert payload["view"] == "timeline"
    assert payload["series"]["trend"]["labels"] == ["AC 007", "AC 012"]
    assert payload["statistics"]["peak_hour"] == "9:00 (3 families)"


def test_view_writes_payload_to_out(config_path: Path, tmp_path: Path) -> None:
    out_path = tmp_path / "views" / "family.json"
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "view",
            "family_size",
            "--config",
            str(config_path),
            "--ac",
            "12",
            "--out",
            str(out_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "View family_size written to:" in result.stdout
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["statistics"]["total_families"] == 6.0
    assert payload["series"]["top_acs"]["labels"] == ["AC 012"]


def test_view_rejects_bad_options(config_path: Path) -> None:
    runner = CliRunner()

    bad_grouping = runner.invoke(
        app, ["view", "timeline", "--config", str(config_path), "--grouping", "weekly"]
    )
    unknown_view = runner.invoke(app, ["view", "households", "--config", str(config_path)])

    assert bad_grouping.exit_code != 0
    assert unknown_view.exit_code != 0


def test_missing_source_exits_with_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("BLA_DASHBOARD_DATA_DIR", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"sources": {"data_dir": str(tmp_path / "empty")}}),
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(app, ["summary", "--config", str(config_path)])

    assert result.exit_code == 1


def test_run_all_writes_outputs(config_path: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    runner = CliRunner()
    result = runner.invoke(app, ["run-all", "--out", str(out_dir), "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "Run complete. Views: overview, family_size" in result.stdout
    assert (out_dir / "series" / "timeline.json").exists()
    assert (out_dir / "tables" / "bla_performance__top_performers.csv").exists()
