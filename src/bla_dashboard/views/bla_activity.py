from __future__ import annotations

from bla_dashboard.config import LimitsConfig
from bla_dashboard.engines.heatmap import build_heatmap_matrix
from bla_dashboard.engines.ranking import build_top_n_ranked, daily_average
from bla_dashboard.engines.series import ChartSeries
from bla_dashboard.engines.time_series import (
    ACTIVITY_DAYPARTS,
    activity_baseline_fallback,
    build_hour_of_day,
    build_time_series,
)
from bla_dashboard.features.filters import filter_date_range
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.views.base import View, ViewResult
from bla_dashboard.views.selection import Selection

PHONES_ADDED = "Phone Numbers Added"
DAILY_TREND_STYLE = {
    "borderColor": "#2563eb",
    "backgroundColor": "rgba(37, 99, 235, 0.1)",
    "fill": True,
    "tension": 0.4,
    "pointBackgroundColor": "#2563eb",
    "pointBorderColor": "#fff",
    "pointBorderWidth": 2,
    "pointRadius": 6,
}


class BLAActivityView(View):
    name = "bla_activity"

    def __init__(
        self,
        *,
        limits: LimitsConfig | None = None,
        initial: Selection | None = None,
        fill_missing_hours: bool = False,
    ) -> None:
        super().__init__(limits=limits, initial=initial)
        self.fill_missing_hours = fill_missing_hours

    def derive(self, data: DashboardData, selection: Selection) -> ViewResult:
        activity = filter_date_range(data.bla_activity, selection.start_date, selection.end_date)
        timeline = filter_date_range(data.timeline, selection.start_date, selection.end_date)

        hourly = ChartSeries.empty()
        if not activity.empty:
            hourly = build_hour_of_day(
                timeline,
                label=PHONES_ADDED,
                dayparts=ACTIVITY_DAYPARTS,
                fallback=(
                    activity_baseline_fallback(len(activity)) if self.fill_missing_hours else None
                ),
            )

        return ViewResult(
            view=self.name,
            selection=selection,
            series={
                "daily_trend": build_time_series(
                    activity,
                    grouping="daily",
                    reducer="sum",
                    value_field="unique_phone_numbers_added",
                    label=PHONES_ADDED,
                    style=DAILY_TREND_STYLE,
                ),
                "hourly_pattern": hourly,
                "top_blas": build_top_n_ranked(
                    activity,
                    entity_key="bla_id",
                    metric=daily_average("unique_phone_numbers_added"),
                    label="Daily Average",
                    name_field="bla_name",
                    top_n=self.limits.top_n,
                    label_max_chars=self.limits.label_max_chars,
                    style={
                        "backgroundColor": "rgba(245, 158, 11, 0.7)",
                        "borderColor": "#f59e0b",
                        "borderWidth": 2,
                    },
                ),
                "heatmap": build_heatmap_matrix(
                    activity,
                    max_entities=self.limits.heatmap_max_entities,
                ),
            },
            statistics={
                "records": len(activity),
                "timeline_records": len(timeline),
                "start_date": selection.start_date,
                "end_date": selection.end_date,
            },
            tables={},
        )
