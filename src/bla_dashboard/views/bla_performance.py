from __future__ import annotations

import pandas as pd

from bla_dashboard.engines.buckets import PERFORMANCE_RANGES, build_range_buckets
from bla_dashboard.engines.ranking import top_records
from bla_dashboard.engines.scatter import build_scatter_sample
from bla_dashboard.engines.statistics import performance_metrics
from bla_dashboard.formatting import format_duration
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.views.base import View, ViewResult
from bla_dashboard.views.selection import Selection

TOP_PERFORMER_COLUMNS = [
    "rank",
    "bla_id",
    "bla_name",
    "total_families_created",
    "avg_duration_minutes",
    "avg_duration",
    "total_verified_members",
]


def top_performers(records: pd.DataFrame, *, top_n: int) -> pd.DataFrame:
    if records.empty:
        return pd.DataFrame(columns=TOP_PERFORMER_COLUMNS)
    top = top_records(records, "total_families_created", top_n=top_n)
    table = pd.DataFrame(
        {
            "rank": range(1, len(top) + 1),
            "bla_id": top["bla_id"],
            "bla_name": top["bla_name"],
            "total_families_created": top["total_families_created"],
            "avg_duration_minutes": top["avg_duration_minutes"],
            "avg_duration": top["avg_duration_minutes"].map(format_duration),
            "total_verified_members": top["total_verified_members"],
        }
    )
    return table[TOP_PERFORMER_COLUMNS]


class BLAPerformanceView(View):
    name = "bla_performance"

    def derive(self, data: DashboardData, selection: Selection) -> ViewResult:
        records = data.bla_performance
        return ViewResult(
            view=self.name,
            selection=selection,
            series={
                "performance_distribution": build_range_buckets(
                    records,
                    value_field="total_families_created",
                    secondary_field="avg_duration_minutes",
                    ranges=PERFORMANCE_RANGES,
                ),
                "efficiency": build_scatter_sample(
                    records,
                    x="total_families_created",
                    y="avg_duration_minutes",
                    extra_fields={"bla_name": "bla_name", "verified": "total_verified_members"},
                    limit=self.limits.scatter_sample_size,
                    label="BLA Performance",
                    style={
                        "backgroundColor": "rgba(16, 185, 129, 0.6)",
                        "borderColor": "#10b981",
                        "borderWidth": 2,
                        "pointRadius": 4,
                    },
                ),
            },
            statistics=performance_metrics(records),
            tables={"top_performers": top_performers(records, top_n=self.limits.top_n)},
        )
