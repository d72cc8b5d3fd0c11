from __future__ import annotations

import pandas as pd

from bla_dashboard.engines.distribution import SIZE_PALETTE, SummedField, build_category_sums
from bla_dashboard.engines.ranking import build_top_n_ranked, total_of
from bla_dashboard.engines.statistics import family_statistics
from bla_dashboard.features.filters import filter_between, filter_equals
from bla_dashboard.features.primitives import unique
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.preprocess.coerce import pad_ac_no
from bla_dashboard.views.base import View, ViewResult
from bla_dashboard.views.selection import ALL, Selection

NORMAL_SIZE_RANGE = (2, 5)


def filter_families(records: pd.DataFrame, selection: Selection) -> pd.DataFrame:
    filtered = records
    if selection.ac != ALL:
        filtered = filter_equals(filtered, "ac_no", pad_ac_no(selection.ac))
    if selection.size_category == "small":
        filtered = filter_equals(filtered, "is_small_family", 1)
    elif selection.size_category == "normal":
        filtered = filter_between(filtered, "family_size", *NORMAL_SIZE_RANGE)
    elif selection.size_category == "large":
        filtered = filter_equals(filtered, "is_large_family", 1)
    return filtered


def ac_options(records: pd.DataFrame) -> list[str]:
    if "ac_no" not in records.columns:
        return []
    return sorted(unique(str(value) for value in records["ac_no"]))


class FamilySizeView(View):
    name = "family_size"
    apply_immediately = True

    def derive(self, data: DashboardData, selection: Selection) -> ViewResult:
        filtered = filter_families(data.family_size, selection)
        return ViewResult(
            view=self.name,
            selection=selection,
            series={
                "size_distribution": build_category_sums(
                    filtered,
                    "family_size",
                    [SummedField("total_families", "Number of Families", SIZE_PALETTE)],
                ),
                "verification": build_category_sums(
                    filtered,
                    "family_size",
                    [
                        SummedField(
                            "families_with_verified",
                            "Families with Verified Members",
                            {
                                "backgroundColor": "rgba(16, 185, 129, 0.7)",
                                "borderColor": "#10b981",
                            },
                        ),
                        SummedField(
                            "families_with_unverified",
                            "Families with Unverified Members",
                            {
                                "backgroundColor": "rgba(245, 158, 11, 0.7)",
                                "borderColor": "#f59e0b",
                            },
                        ),
                    ],
                ),
                "top_acs": build_top_n_ranked(
                    filtered,
                    entity_key="ac_no",
                    metric=total_of("total_families"),
                    label="Total Families",
                    top_n=self.limits.top_n,
                    label_format=lambda ac: f"AC {ac}",
                    style={
                        "backgroundColor": "rgba(37, 99, 235, 0.7)",
                        "borderColor": "#2563eb",
                        "borderWidth": 2,
                    },
                ),
            },
            statistics={
                **family_statistics(filtered),
                "ac_options": ac_options(data.family_size),
            },
            tables={},
        )
