from __future__ import annotations

import math

import pandas as pd

from bla_dashboard.preprocess.coerce import parse_int


def format_number(value: float) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_exact_number(value: object) -> str:
    return f"{parse_int(value):,}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(minutes: float) -> str:
    if minutes < 60:
        return f"{_round_half_up(minutes)}m"
    hours = int(minutes // 60)
    remainder = _round_half_up(minutes % 60)
    return f"{hours}h {remainder}m"


def format_percentage(part: float, total: float) -> str:
    if total == 0:
        return "0%"
    return f"{part / total * 100:.1f}%"


def format_short_date(value: str) -> str:
    """``2025-07-01`` -> ``Jul 1``; unparseable input is returned unchanged."""
    timestamp = pd.to_datetime(value, errors="coerce")
    if pd.isna(timestamp):
        return str(value)
    return f"{timestamp:%b} {timestamp.day}"


def truncate_label(label: str, max_chars: int = 15) -> str:
    if len(label) > max_chars:
        return label[:max_chars] + "..."
    return label


def format_count_label(count: int, noun: str) -> str:
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M+ {noun}"
    if count >= 1_000:
        return f"{count // 1_000}K+ {noun}"
    return f"{count} {noun}"
