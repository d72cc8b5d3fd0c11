from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    series: Path
    tables: Path
    figures: Path
    summary: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        series=out_dir / "series",
        tables=out_dir / "tables",
        figures=out_dir / "figures",
        summary=out_dir / "summary",
    )
    for path in (
        paths.root,
        paths.series,
        paths.tables,
        paths.figures,
        paths.summary,
    ):
        path.mkdir(parents=True, exist_ok=True)
    return paths
