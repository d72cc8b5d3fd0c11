from __future__ import annotations

from bla_dashboard.engines.statistics import build_coverage_doughnut, overview_metrics, summary_rows
from bla_dashboard.engines.time_series import build_time_series
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.views.base import View, ViewResult
from bla_dashboard.views.selection import Selection

PHONE_TREND_STYLE = {
    "borderColor": "#2563eb",
    "backgroundColor": "rgba(37,99,235,0.15)",
    "fill": True,
    "tension": 0.35,
    "pointRadius": 4,
}


class OverviewView(View):
    name = "overview"

    def derive(self, data: DashboardData, selection: Selection) -> ViewResult:
        activity = data.bla_activity
        return ViewResult(
            view=self.name,
            selection=selection,
            series={
                "coverage": build_coverage_doughnut(activity, total_acs=self.limits.total_acs),
                "daily_trend": build_time_series(
                    activity,
                    grouping="daily",
                    reducer="sum",
                    value_field="unique_phone_numbers_added",
                    label="Phone Numbers Added",
                    style=PHONE_TREND_STYLE,
                ),
            },
            statistics={
                **overview_metrics(data),
                "total_acs": self.limits.total_acs,
            },
            tables={"data_summary": summary_rows(data, total_acs=self.limits.total_acs)},
        )
