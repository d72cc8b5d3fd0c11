from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
import yaml

from bla_dashboard.config import DATA_DIR_ENV_VAR, SourcesConfig
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.preprocess.normalize import normalize_records

SOURCE_CSV: dict[str, str] = {
    "family_size": "\n".join(
        [
            "ac_no,booth_no,family_size,total_families,families_with_verified,"
            "families_with_unverified,is_small_family,is_large_family",
            "7,1,1,10,6,4,1,0",
            "12,2,1,5,3,2,1,0",
            "7,3,3,2,2,0,0,0",
            "12,4,7,1,1,1,0,1",
        ]
    ),
    "bla_activity": "\n".join(
        [
            "ac_no,date,bla_id,bla_name,unique_phone_numbers_added,phone_numbers",
            "7,2025-07-01,B1,Alice,10,",
            "7,2025-07-02,B1,Alice,20,",
            "12,2025-07-01,B2,Bob,5,",
            "12,2025-07-03,B2,Bob,7,",
            "12,2025-07-02,B1,Alice,6,",
            "7,,B3,Carol Very Long Name Here,3,",
        ]
    ),
    "bla_performance": "\n".join(
        [
            "bla_id,bla_name,total_families_created,avg_duration_minutes,median_duration_minutes,"
            "min_duration_minutes,max_duration_minutes,avg_family_size,total_verified_members,"
            "acs_worked,booths_worked",
            "B1,Alice,120,10.5,9,1,30,2.5,200,2,3",
            "B2,Bob,40,20,18,2,45,3.1,50,1,1",
            "B3,Carol,0,5,5,5,5,1,0,1,1",
            "B4,Dan,350,8,7,1,20,2.2,500,3,6",
        ]
    ),
    "timeline": "\n".join(
        [
            "ac_no,booth_no,family_id,family_size,verified_count,bla_id,bla_name,"
            "first_member_time,last_member_time,creation_duration_minutes,date,start_hour",
            "7,1,F1,1,1,B1,Alice,2025-07-01 09:00:00,2025-07-01 09:05:00,5,2025-07-01,9",
            "7,3,F2,3,2,B1,Alice,2025-07-01 09:10:00,2025-07-01 09:25:00,15,2025-07-01,9",
            "12,2,F3,3,3,B2,Bob,2025-07-02 14:00:00,2025-07-02 13:58:00,-2,2025-07-02,14",
            "12,4,F4,2,1,B2,Bob,2025-07-03 09:00:00,2025-07-03 05:00:00,1200,2025-07-03,9",
        ]
    ),
}


def _raw_frame(text: str) -> pd.DataFrame:
    header, *rows = text.split("\n")
    columns = header.split(",")
    records = [
        {column: (cell or None) for column, cell in zip(columns, row.split(","))} for row in rows
    ]
    return pd.DataFrame(records, columns=columns, dtype=object)


def _write_source_csvs(data_dir: Path) -> dict[str, Path]:
    paths = SourcesConfig(data_dir=str(data_dir)).source_paths()
    for source_id, path in paths.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(SOURCE_CSV[source_id] + "\n", encoding="utf-8")
    return paths


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "data"
    _write_source_csvs(directory)
    return directory


@pytest.fixture
def source_paths(data_dir: Path) -> dict[str, Path]:
    return SourcesConfig(data_dir=str(data_dir)).source_paths()


@pytest.fixture
def config_path(tmp_path: Path, data_dir: Path, monkeypatch) -> Path:
    monkeypatch.delenv(DATA_DIR_ENV_VAR, raising=False)
    config_data = {
        "sources": {"data_dir": str(data_dir)},
        "outputs": {"render_figures": False},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config_data), encoding="utf-8")
    return path


@pytest.fixture
def dashboard_data() -> DashboardData:
    return DashboardData(
        **{
            source_id: normalize_records(_raw_frame(text), source_id)
            for source_id, text in SOURCE_CSV.items()
        }
    )
