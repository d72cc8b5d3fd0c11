from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from bla_dashboard.engines.dual_axis import member_label
from bla_dashboard.engines.series import ChartDataset, ChartSeries
from bla_dashboard.features.primitives import Accessor, group_by, sum_by

_INTEGER_KEY = re.compile(r"^-?\d+$")

SIZE_PALETTE: dict[str, list[str]] = {
    "backgroundColor": [
        "rgba(37, 99, 235, 0.7)",
        "rgba(16, 185, 129, 0.7)",
        "rgba(245, 158, 11, 0.7)",
        "rgba(239, 68, 68, 0.7)",
        "rgba(139, 92, 246, 0.7)",
    ],
    "borderColor": [
        "rgb(37, 99, 235)",
        "rgb(16, 185, 129)",
        "rgb(245, 158, 11)",
        "rgb(239, 68, 68)",
        "rgb(139, 92, 246)",
    ],
}


@dataclass(frozen=True)
class SummedField:
    key: Accessor
    label: str
    style: dict[str, Any] = field(default_factory=dict)


def numeric_category_groups(
    records: pd.DataFrame, category_field: Accessor
) -> list[tuple[int, pd.DataFrame]]:
    """Groups whose key is an integer, ordered by that integer."""
    groups = group_by(records, category_field)
    return sorted(
        ((int(key), group) for key, group in groups.items() if _INTEGER_KEY.match(key)),
        key=lambda item: item[0],
    )


def build_category_sums(
    records: pd.DataFrame,
    category_field: Accessor,
    values: Sequence[SummedField],
    *,
    label_format: Callable[[int], str] = member_label,
) -> ChartSeries:
    if records.empty:
        return ChartSeries.empty()
    categories = numeric_category_groups(records, category_field)
    if not categories:
        return ChartSeries.empty()
    return ChartSeries(
        labels=[label_format(category) for category, _ in categories],
        datasets=[
            ChartDataset(
                label=summed.label,
                data=[sum_by(group, summed.key) for _, group in categories],
                style={"borderWidth": 2, **summed.style},
            )
            for summed in values
        ],
    )
