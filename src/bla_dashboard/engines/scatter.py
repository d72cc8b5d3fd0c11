from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pandas as pd

from bla_dashboard.engines.series import ScatterPoint, ScatterSeries
from bla_dashboard.features.primitives import sort_by
from bla_dashboard.preprocess.coerce import parse_number

DEFAULT_SAMPLE_SIZE = 1000


def build_scatter_sample(
    records: pd.DataFrame,
    *,
    x: str,
    y: str,
    extra_fields: Mapping[str, str] | None = None,
    limit: int = DEFAULT_SAMPLE_SIZE,
    label: str = "Sample",
    style: dict[str, Any] | None = None,
) -> ScatterSeries:
    """Top ``limit`` records by ``x`` (descending) as scatter points.

    ``extra_fields`` maps output keys to record columns carried on each point.
    """
    if records.empty:
        return ScatterSeries(label=label, points=[], style=dict(style or {}))
    sample = sort_by(records, x, "desc").head(limit)
    extras = dict(extra_fields or {})
    points = []
    for row in sample.to_dict(orient="records"):
        points.append(
            ScatterPoint(
                x=parse_number(row.get(x)),
                y=parse_number(row.get(y)),
                extra={name: row.get(column) for name, column in extras.items()},
            )
        )
    return ScatterSeries(label=label, points=points, style=dict(style or {}))
