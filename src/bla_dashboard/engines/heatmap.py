from __future__ import annotations

import pandas as pd

from bla_dashboard.engines.series import HeatmapCell, HeatmapMatrix
from bla_dashboard.features.primitives import group_keys, numeric_values

DEFAULT_MAX_ENTITIES = 20


def heatmap_frame(
    records: pd.DataFrame,
    *,
    date_field: str = "date",
    entity_field: str = "ac_no",
    value_field: str = "unique_phone_numbers_added",
    max_entities: int = DEFAULT_MAX_ENTITIES,
) -> pd.DataFrame:
    """Dense dates x entities frame of summed values; missing combinations are 0."""
    if records.empty or date_field not in records.columns:
        return pd.DataFrame(dtype=float)
    dated = records.loc[records[date_field].notna()]
    if dated.empty:
        return pd.DataFrame(dtype=float)

    working = pd.DataFrame(
        {
            "date": group_keys(dated, date_field),
            "entity": group_keys(dated, entity_field),
            "value": numeric_values(dated, value_field),
        }
    )
    dates = sorted(working["date"].unique())
    entities = sorted(working["entity"].unique())[:max_entities]
    return (
        working.groupby(["date", "entity"], sort=False)["value"]
        .sum()
        .unstack(fill_value=0.0)
        .reindex(index=dates, columns=entities, fill_value=0.0)
        .astype(float)
    )


def build_heatmap_matrix(
    records: pd.DataFrame,
    *,
    date_field: str = "date",
    entity_field: str = "ac_no",
    value_field: str = "unique_phone_numbers_added",
    max_entities: int = DEFAULT_MAX_ENTITIES,
) -> HeatmapMatrix:
    pivot = heatmap_frame(
        records,
        date_field=date_field,
        entity_field=entity_field,
        value_field=value_field,
        max_entities=max_entities,
    )
    if pivot.empty:
        return HeatmapMatrix.empty()

    dates = [str(date) for date in pivot.index]
    entities = [str(entity) for entity in pivot.columns]
    values = pivot.to_numpy(dtype=float)
    cells = [
        HeatmapCell(
            x=date_index,
            y=entity_index,
            value=float(values[date_index, entity_index]),
            date=date,
            entity=entity,
        )
        for date_index, date in enumerate(dates)
        for entity_index, entity in enumerate(entities)
    ]
    return HeatmapMatrix(cells=cells, dates=dates, entities=entities)
