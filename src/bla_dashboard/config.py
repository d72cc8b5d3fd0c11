from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

Grouping = Literal["hourly", "daily", "by-entity"]
Metric = Literal["count", "average-size", "average-duration"]
SizeCategory = Literal["all", "small", "normal", "large"]

DATA_DIR_ENV_VAR = "BLA_DASHBOARD_DATA_DIR"


class SourcesConfig(BaseModel):
    data_dir: str = "data"
    family_size: str = "family_phone_analysis_csv/02_family_size_analysis.csv"
    bla_activity: str = "family_phone_analysis_csv/04_bla_daily_activity.csv"
    bla_performance: str = "bla_timeline_analysis_csv/02_bla_performance_summary.csv"
    timeline: str = "bla_timeline_analysis_csv/01_family_creation_timeline.csv"

    def source_paths(self) -> dict[str, Path]:
        base_dir = Path(self.data_dir)
        return {
            "family_size": base_dir / self.family_size,
            "bla_activity": base_dir / self.bla_activity,
            "bla_performance": base_dir / self.bla_performance,
            "timeline": base_dir / self.timeline,
        }


class LimitsConfig(BaseModel):
    top_n: int = Field(default=20, ge=1)
    heatmap_max_entities: int = Field(default=20, ge=1)
    scatter_sample_size: int = Field(default=1000, ge=1)
    duration_by_size_max_categories: int = Field(default=10, ge=1)
    label_max_chars: int = Field(default=15, ge=1)
    total_acs: int = Field(default=234, ge=0)
    valid_duration_max_minutes: float = Field(default=1000.0, gt=0.0)


class ActivityViewConfig(BaseModel):
    start_date: str | None = "2025-07-01"
    end_date: str | None = "2025-07-13"
    fill_missing_hours: bool = False


class FamilySizeViewConfig(BaseModel):
    ac: str = "all"
    size_category: SizeCategory = "all"


class TimelineViewConfig(BaseModel):
    metric: Metric = "count"
    grouping: Grouping = "daily"
    start_date: str | None = None
    end_date: str | None = None


class ViewsConfig(BaseModel):
    bla_activity: ActivityViewConfig = Field(default_factory=ActivityViewConfig)
    family_size: FamilySizeViewConfig = Field(default_factory=FamilySizeViewConfig)
    timeline: TimelineViewConfig = Field(default_factory=TimelineViewConfig)


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"
    render_figures: bool = True


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    views: ViewsConfig = Field(default_factory=ViewsConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    env_data_dir = os.getenv(DATA_DIR_ENV_VAR)
    config.sources.data_dir = (
        _resolve_optional_path(env_data_dir, Path.cwd())
        or _resolve_optional_path(config.sources.data_dir, base_dir)
        or str(base_dir)
    )
    return config
