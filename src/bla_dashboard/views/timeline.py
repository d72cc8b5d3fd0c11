from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from bla_dashboard.config import Grouping, Metric
from bla_dashboard.engines.dual_axis import build_duration_by_category
from bla_dashboard.engines.series import ChartSeries
from bla_dashboard.engines.statistics import timeline_statistics
from bla_dashboard.engines.time_series import Reducer, build_hour_of_day, build_time_series
from bla_dashboard.features.filters import filter_date_range
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.views.base import View, ViewResult
from bla_dashboard.views.selection import Selection


@dataclass(frozen=True)
class TrendMetric:
    label: str
    axis_label: str
    reducer: Reducer
    value_field: str | None
    color: str
    fill: str
    min_value: float | None = None


METRICS: dict[Metric, TrendMetric] = {
    "count": TrendMetric(
        label="Families Created",
        axis_label="Number of Families",
        reducer="count",
        value_field=None,
        color="#2563eb",
        fill="rgba(37, 99, 235, 0.1)",
    ),
    "average-size": TrendMetric(
        label="Average Family Size",
        axis_label="Average Family Size",
        reducer="avg",
        value_field="family_size",
        color="#10b981",
        fill="rgba(16, 185, 129, 0.1)",
    ),
    # Negative durations are data errors and stay out of the average.
    "average-duration": TrendMetric(
        label="Average Duration",
        axis_label="Average Duration (minutes)",
        reducer="avg",
        value_field="creation_duration_minutes",
        color="#f59e0b",
        fill="rgba(245, 158, 11, 0.1)",
        min_value=0.0,
    ),
}

GROUPING_TITLES: dict[Grouping, str] = {
    "hourly": "Hourly",
    "daily": "Daily",
    "by-entity": "AC-wise",
}


def build_timeline_trend(
    records: pd.DataFrame,
    *,
    grouping: Grouping,
    metric: Metric,
) -> ChartSeries:
    trend = METRICS[metric]
    return build_time_series(
        records,
        grouping=grouping,
        reducer=trend.reducer,
        value_field=trend.value_field,
        min_value=trend.min_value,
        label=trend.label,
        label_format=(lambda ac: f"AC {ac}") if grouping == "by-entity" else None,
        style={
            "borderColor": trend.color,
            "backgroundColor": trend.fill,
            "fill": True,
            "tension": 0.4,
            "pointBackgroundColor": trend.color,
            "pointBorderColor": "#fff",
            "pointBorderWidth": 2,
            "pointRadius": 4,
        },
        meta={
            "chartTitle": f"{GROUPING_TITLES[grouping]} {trend.label}",
            "yAxisLabel": trend.axis_label,
        },
    )


class TimelineView(View):
    name = "timeline"

    def derive(self, data: DashboardData, selection: Selection) -> ViewResult:
        records = filter_date_range(data.timeline, selection.start_date, selection.end_date)
        return ViewResult(
            view=self.name,
            selection=selection,
            series={
                "trend": build_timeline_trend(
                    records,
                    grouping=selection.grouping,
                    metric=selection.metric,
                ),
                "duration_by_size": build_duration_by_category(
                    records,
                    max_categories=self.limits.duration_by_size_max_categories,
                ),
                "work_pattern": build_hour_of_day(records, label="Families Created"),
            },
            statistics=timeline_statistics(
                records,
                max_valid_minutes=self.limits.valid_duration_max_minutes,
            ),
            tables={},
        )
