from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

import pandas as pd

from bla_dashboard.config import LimitsConfig
from bla_dashboard.engines.series import ChartSeries, HeatmapMatrix, ScatterSeries
from bla_dashboard.io.loader import DashboardData
from bla_dashboard.views.selection import SELECTION_OPTIONS, Selection, normalize_selection

LOGGER = logging.getLogger(__name__)

SeriesPayload = ChartSeries | HeatmapMatrix | ScatterSeries


@dataclass(frozen=True)
class ViewResult:
    view: str
    selection: Selection
    series: dict[str, SeriesPayload]
    statistics: dict[str, Any]
    tables: dict[str, pd.DataFrame]

    def payload(self) -> dict[str, Any]:
        return {name: series.to_dict() for name, series in self.series.items()}


class View:
    """Dashboard view with a pending selection (being edited) and an applied one.

    Only the applied selection drives ``compute``; ``apply`` promotes the pending
    selection unless the view applies every edit immediately.
    """

    name: str
    apply_immediately: bool = False

    def __init__(
        self,
        *,
        limits: LimitsConfig | None = None,
        initial: Selection | None = None,
    ) -> None:
        self.limits = limits or LimitsConfig()
        self.defaults = initial or Selection()
        self.pending = self.defaults
        self.applied = self.defaults
        self._memo: tuple[DashboardData, Selection, ViewResult] | None = None

    def edit(self, **changes: Any) -> Selection:
        unknown = sorted(set(changes) - set(SELECTION_OPTIONS))
        if unknown:
            raise ValueError(f"Unknown selection options for {self.name}: {', '.join(unknown)}")
        self.pending = normalize_selection(
            {**asdict(self.pending), **changes},
            defaults=self.defaults,
        )
        if self.apply_immediately:
            self.apply()
        return self.pending

    def apply(self) -> Selection:
        self.applied = self.pending
        return self.applied

    def compute(self, data: DashboardData) -> ViewResult:
        if self._memo is not None:
            memo_data, memo_selection, memo_result = self._memo
            if memo_data is data and memo_selection == self.applied:
                return memo_result
        LOGGER.info("Computing view %s with %s", self.name, self.applied)
        result = self.derive(data, self.applied)
        self._memo = (data, self.applied, result)
        return result

    def derive(self, data: DashboardData, selection: Selection) -> ViewResult:
        raise NotImplementedError
