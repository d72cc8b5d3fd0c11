from __future__ import annotations

from bla_dashboard.config import AppConfig
from bla_dashboard.views.base import View
from bla_dashboard.views.bla_activity import BLAActivityView
from bla_dashboard.views.bla_performance import BLAPerformanceView
from bla_dashboard.views.family_size import FamilySizeView
from bla_dashboard.views.overview import OverviewView
from bla_dashboard.views.selection import Selection
from bla_dashboard.views.timeline import TimelineView


def default_views(config: AppConfig) -> list[View]:
    limits = config.limits
    views = config.views
    return [
        OverviewView(limits=limits),
        FamilySizeView(
            limits=limits,
            initial=Selection(
                ac=views.family_size.ac,
                size_category=views.family_size.size_category,
            ),
        ),
        BLAActivityView(
            limits=limits,
            initial=Selection(
                start_date=views.bla_activity.start_date,
                end_date=views.bla_activity.end_date,
            ),
            fill_missing_hours=views.bla_activity.fill_missing_hours,
        ),
        BLAPerformanceView(limits=limits),
        TimelineView(
            limits=limits,
            initial=Selection(
                start_date=views.timeline.start_date,
                end_date=views.timeline.end_date,
                grouping=views.timeline.grouping,
                metric=views.timeline.metric,
            ),
        ),
    ]


def view_names(config: AppConfig) -> list[str]:
    return [view.name for view in default_views(config)]


def get_view(config: AppConfig, name: str) -> View:
    for view in default_views(config):
        if view.name == name:
            return view
    raise ValueError(f"Unknown view: {name}")
