from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChartDataset:
    label: str
    data: list[float]
    style: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "data": list(self.data), **self.style}


@dataclass(frozen=True)
class ChartSeries:
    """Named-series payload consumed by chart renderers."""

    labels: list[str]
    datasets: list[ChartDataset]
    meta: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls, **meta: Any) -> ChartSeries:
        return cls(labels=[], datasets=[], meta=dict(meta))

    @property
    def is_empty(self) -> bool:
        return not self.labels and not self.datasets

    def dataset(self, label: str) -> ChartDataset:
        for dataset in self.datasets:
            if dataset.label == label:
                return dataset
        raise KeyError(label)

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": list(self.labels),
            "datasets": [dataset.to_dict() for dataset in self.datasets],
            **self.meta,
        }


@dataclass(frozen=True)
class HeatmapCell:
    x: int
    y: int
    value: float
    date: str
    entity: str

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "value": self.value, "date": self.date, "ac": self.entity}


@dataclass(frozen=True)
class HeatmapMatrix:
    cells: list[HeatmapCell]
    dates: list[str]
    entities: list[str]

    @classmethod
    def empty(cls) -> HeatmapMatrix:
        return cls(cells=[], dates=[], entities=[])

    @property
    def is_empty(self) -> bool:
        return not self.cells

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [cell.to_dict() for cell in self.cells],
            "dates": list(self.dates),
            "acs": list(self.entities),
        }


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, **self.extra}


@dataclass(frozen=True)
class ScatterSeries:
    label: str
    points: list[ScatterPoint]
    style: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_dict(self) -> dict[str, Any]:
        if not self.points:
            return {"datasets": []}
        return {
            "datasets": [
                {
                    "label": self.label,
                    "data": [point.to_dict() for point in self.points],
                    **self.style,
                }
            ]
        }
