from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from bla_dashboard.io.read import read_tabular_source
from bla_dashboard.io.schema import SOURCE_IDS
from bla_dashboard.preprocess.normalize import normalize_records

LOGGER = logging.getLogger(__name__)

Reader = Callable[[Path], pd.DataFrame]


class SourceLoadError(RuntimeError):
    def __init__(self, source_id: str, message: str) -> None:
        super().__init__(f"Failed to load {source_id}: {message}")
        self.source_id = source_id
        self.message = message


@dataclass(frozen=True)
class DashboardData:
    family_size: pd.DataFrame
    bla_activity: pd.DataFrame
    bla_performance: pd.DataFrame
    timeline: pd.DataFrame

    def frames(self) -> dict[str, pd.DataFrame]:
        return {
            "family_size": self.family_size,
            "bla_activity": self.bla_activity,
            "bla_performance": self.bla_performance,
            "timeline": self.timeline,
        }


class DatasetCache:
    """Loads each named source at most once and keeps the normalized frames.

    Concurrent loads of one source share a single in-flight task. Failed loads
    are not cached, so the next call reads the source again.
    """

    def __init__(self, sources: Mapping[str, Path], reader: Reader = read_tabular_source) -> None:
        self._sources = dict(sources)
        self._reader = reader
        self._cache: dict[str, pd.DataFrame] = {}
        self._inflight: dict[str, asyncio.Task[pd.DataFrame]] = {}

    def is_cached(self, source_id: str) -> bool:
        return source_id in self._cache

    def clear_cache(self) -> None:
        self._cache = {}
        LOGGER.info("Data cache cleared")

    def _read_and_normalize(self, source_id: str, path: Path) -> pd.DataFrame:
        raw = self._reader(path)
        return normalize_records(raw, source_id)

    async def _fetch(self, source_id: str) -> pd.DataFrame:
        path = self._sources[source_id]
        loop = asyncio.get_running_loop()
        try:
            frame = await loop.run_in_executor(None, self._read_and_normalize, source_id, path)
        except Exception as exc:
            LOGGER.error("Failed to load %s from %s: %s", source_id, path, exc)
            raise SourceLoadError(source_id, str(exc)) from exc
        finally:
            self._inflight.pop(source_id, None)
        self._cache[source_id] = frame
        LOGGER.info("Loaded %s: %d records", source_id, len(frame))
        return frame

    async def load(self, source_id: str) -> pd.DataFrame:
        if source_id not in self._sources:
            raise SourceLoadError(source_id, "unknown source id")
        cached = self._cache.get(source_id)
        if cached is not None:
            LOGGER.debug("Loading %s from cache", source_id)
            return cached
        task = self._inflight.get(source_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(source_id))
            self._inflight[source_id] = task
        return await asyncio.shield(task)

    async def load_all(self) -> DashboardData:
        frames = await asyncio.gather(*(self.load(source_id) for source_id in SOURCE_IDS))
        return DashboardData(**dict(zip(SOURCE_IDS, frames)))

    async def refresh(self) -> DashboardData:
        self.clear_cache()
        return await self.load_all()


def build_dataset_cache(source_paths: Mapping[str, Path]) -> DatasetCache:
    missing = [source_id for source_id in SOURCE_IDS if source_id not in source_paths]
    if missing:
        raise ValueError(f"Missing source paths: {', '.join(missing)}")
    return DatasetCache(source_paths)


def load_dashboard_data(source_paths: Mapping[str, Path]) -> DashboardData:
    return asyncio.run(build_dataset_cache(source_paths).load_all())
