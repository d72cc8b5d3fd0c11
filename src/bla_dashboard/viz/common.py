from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt


def figure_path(figures_dir: Path, view: str, series: str, fmt: str = "png") -> Path:
    return figures_dir / view / f"{series}.{fmt.lstrip('.')}"


def save_figure(path: Path, *, dpi: int = 120) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=dpi)
    plt.close()
    return path
