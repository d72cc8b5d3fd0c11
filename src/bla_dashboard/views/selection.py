from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, get_args

from bla_dashboard.config import Grouping, Metric, SizeCategory

ALL = "all"

GROUPING_ALIASES: dict[str, Grouping] = {"ac": "by-entity", "entity": "by-entity"}
METRIC_ALIASES: dict[str, Metric] = {
    "families": "count",
    "family-size": "average-size",
    "duration": "average-duration",
}


@dataclass(frozen=True)
class Selection:
    start_date: str | None = None
    end_date: str | None = None
    ac: str = ALL
    size_category: SizeCategory = ALL
    grouping: Grouping = "daily"
    metric: Metric = "count"


SELECTION_OPTIONS: tuple[str, ...] = tuple(option.name for option in fields(Selection))


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_choice(
    value: Any,
    choices: tuple[str, ...],
    aliases: Mapping[str, str],
    default: str,
) -> str:
    text = _as_text(value)
    if text is None:
        return default
    text = aliases.get(text.lower(), text.lower())
    return text if text in choices else default


def normalize_selection(
    raw: Mapping[str, Any] | None,
    *,
    defaults: Selection | None = None,
) -> Selection:
    """Build a selection from loosely typed options; unknown values fall back to ``defaults``."""
    defaults = defaults or Selection()
    raw = raw or {}

    start_date = _as_text(raw["start_date"]) if "start_date" in raw else defaults.start_date
    end_date = _as_text(raw["end_date"]) if "end_date" in raw else defaults.end_date
    ac = _as_text(raw.get("ac")) or defaults.ac

    return Selection(
        start_date=start_date,
        end_date=end_date,
        ac=ac,
        size_category=_as_choice(  # type: ignore[arg-type]
            raw.get("size_category"), get_args(SizeCategory), {}, defaults.size_category
        ),
        grouping=_as_choice(  # type: ignore[arg-type]
            raw.get("grouping"), get_args(Grouping), GROUPING_ALIASES, defaults.grouping
        ),
        metric=_as_choice(  # type: ignore[arg-type]
            raw.get("metric"), get_args(Metric), METRIC_ALIASES, defaults.metric
        ),
    )
