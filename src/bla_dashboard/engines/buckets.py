from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from bla_dashboard.engines.dual_axis import build_dual_axis
from bla_dashboard.engines.series import ChartSeries
from bla_dashboard.features.primitives import avg_by, numeric_values


@dataclass(frozen=True)
class ValueRange:
    label: str
    min: float
    max: float = math.inf

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


# Ranges start at 1: entities with a zero count fall outside the distribution.
PERFORMANCE_RANGES: tuple[ValueRange, ...] = (
    ValueRange("1-50", 1, 50),
    ValueRange("51-100", 51, 100),
    ValueRange("101-200", 101, 200),
    ValueRange("201-300", 201, 300),
    ValueRange("301+", 301),
)


def classify_ranges(
    records: pd.DataFrame,
    value_field: str,
    ranges: tuple[ValueRange, ...] = PERFORMANCE_RANGES,
) -> pd.Series:
    """Label of the first range containing each record's value, or None."""
    values = numeric_values(records, value_field)

    def _classify(value: float) -> str | None:
        for value_range in ranges:
            if value_range.contains(value):
                return value_range.label
        return None

    return values.map(_classify).astype(object)


def range_distribution(
    records: pd.DataFrame,
    *,
    value_field: str,
    secondary_field: str,
    ranges: tuple[ValueRange, ...] = PERFORMANCE_RANGES,
) -> pd.DataFrame:
    labels = classify_ranges(records, value_field, ranges)
    rows = []
    for value_range in ranges:
        in_range = records.loc[labels == value_range.label]
        rows.append(
            {
                "label": value_range.label,
                "count": len(in_range),
                "secondary_avg": avg_by(in_range, secondary_field),
            }
        )
    return pd.DataFrame(rows, columns=["label", "count", "secondary_avg"])


def build_range_buckets(
    records: pd.DataFrame,
    *,
    value_field: str = "total_families_created",
    secondary_field: str = "avg_duration_minutes",
    ranges: tuple[ValueRange, ...] = PERFORMANCE_RANGES,
    count_label: str = "Number of BLAs",
    secondary_label: str = "Avg Duration (minutes)",
) -> ChartSeries:
    if records.empty:
        return ChartSeries.empty()
    distribution = range_distribution(
        records,
        value_field=value_field,
        secondary_field=secondary_field,
        ranges=ranges,
    )
    return build_dual_axis(
        distribution["label"].tolist(),
        bar_label=count_label,
        bar_values=distribution["count"].astype(float).tolist(),
        line_label=secondary_label,
        line_values=distribution["secondary_avg"].astype(float).tolist(),
    )
