from __future__ import annotations

import asyncio
import threading
import time
from pathlib import Path

import pandas as pd
import pytest

from bla_dashboard.io.loader import (
    DashboardData,
    DatasetCache,
    SourceLoadError,
    build_dataset_cache,
    load_dashboard_data,
)
from bla_dashboard.io.schema import SOURCE_IDS

SOURCES = {source_id: Path(f"{source_id}.csv") for source_id in SOURCE_IDS}


class CountingReader:
    def __init__(self, *, delay: float = 0.0, failures: dict[str, int] | None = None) -> None:
        self.delay = delay
        self.failures = dict(failures or {})
        self.calls: dict[str, int] = {}
        self._lock = threading.Lock()

    def __call__(self, path: Path) -> pd.DataFrame:
        with self._lock:
            self.calls[path.stem] = self.calls.get(path.stem, 0) + 1
            failing = self.failures.get(path.stem, 0) > 0
            if failing:
                self.failures[path.stem] -= 1
        if self.delay:
            time.sleep(self.delay)
        if failing:
            raise OSError(f"cannot read {path.name}")
        return pd.DataFrame({"ac_no": ["7"], "bla_id": ["B1"]}, dtype=object)


def test_load_reads_once_and_serves_from_cache() -> None:
    reader = CountingReader()
    cache = DatasetCache(SOURCES, reader=reader)

    async def _scenario() -> tuple[pd.DataFrame, pd.DataFrame]:
        first = await cache.load("family_size")
        second = await cache.load("family_size")
        return first, second

    first, second = asyncio.run(_scenario())

    assert first is second
    assert first["ac_no"].tolist() == ["007"]
    assert reader.calls == {"family_size": 1}
    assert cache.is_cached("family_size")


def test_concurrent_loads_share_one_read() -> None:
    reader = CountingReader(delay=0.05)
    cache = DatasetCache(SOURCES, reader=reader)

    async def _scenario() -> list[pd.DataFrame]:
        return await asyncio.gather(*(cache.load("timeline") for _ in range(5)))

    frames = asyncio.run(_scenario())

    assert reader.calls == {"timeline": 1}
    assert all(frame is frames[0] for frame in frames)


def test_clear_cache_forces_reread() -> None:
    reader = CountingReader()
    cache = DatasetCache(SOURCES, reader=reader)

    async def _scenario() -> None:
        await cache.load("bla_activity")
        cache.clear_cache()
        assert not cache.is_cached("bla_activity")
        await cache.load("bla_activity")

    asyncio.run(_scenario())

    assert reader.calls == {"bla_activity": 2}


def test_failed_load_is_not_cached_and_can_be_retried() -> None:
    reader = CountingReader(failures={"bla_performance": 1})
    cache = DatasetCache(SOURCES, reader=reader)

    with pytest.raises(SourceLoadError) as excinfo:
        asyncio.run(cache.load("bla_performance"))

    assert excinfo.value.source_id == "bla_performance"
    assert "cannot read" in excinfo.value.message
    assert not cache.is_cached("bla_performance")

    frame = asyncio.run(cache.load("bla_performance"))
    assert frame["bla_id"].tolist() == ["B1"]
    assert reader.calls == {"bla_performance": 2}


def test_unknown_source_raises_source_load_error() -> None:
    cache = DatasetCache(SOURCES, reader=CountingReader())

    with pytest.raises(SourceLoadError) as excinfo:
        asyncio.run(cache.load("households"))

    assert excinfo.value.source_id == "households"


def test_load_all_fails_fast_with_failing_source() -> None:
    reader = CountingReader(failures={"timeline": 1})
    cache = DatasetCache(SOURCES, reader=reader)

    with pytest.raises(SourceLoadError) as excinfo:
        asyncio.run(cache.load_all())

    assert excinfo.value.source_id == "timeline"


def test_load_all_and_refresh() -> None:
    reader = CountingReader()
    cache = DatasetCache(SOURCES, reader=reader)

    async def _scenario() -> tuple[DashboardData, DashboardData]:
        loaded = await cache.load_all()
        refreshed = await cache.refresh()
        return loaded, refreshed

    loaded, refreshed = asyncio.run(_scenario())

    assert set(loaded.frames()) == set(SOURCE_IDS)
    assert loaded.family_size is not refreshed.family_size
    assert reader.calls == {source_id: 2 for source_id in SOURCE_IDS}


def test_build_dataset_cache_requires_every_source() -> None:
    with pytest.raises(ValueError, match="timeline"):
        build_dataset_cache({"family_size": Path("a.csv")})


def test_load_dashboard_data_reads_csv_sources(source_paths: dict[str, Path]) -> None:
    data = load_dashboard_data(source_paths)

    assert len(data.family_size) == 4
    assert len(data.bla_activity) == 6
    assert data.bla_activity["date"].tolist()[-1] is None
    assert data.bla_performance["avg_duration_minutes"].tolist() == [10.5, 20.0, 5.0, 8.0]
    assert data.timeline["start_hour"].tolist() == [9, 9, 14, 9]


def test_load_dashboard_data_missing_file_raises(tmp_path: Path) -> None:
    sources = {source_id: tmp_path / f"{source_id}.csv" for source_id in SOURCE_IDS}

    with pytest.raises(SourceLoadError):
        load_dashboard_data(sources)


def test_overlapping_refreshes_read_each_source_once() -> None:
    reader = CountingReader(delay=0.05)
    cache = DatasetCache(SOURCES, reader=reader)

    async def _scenario() -> list[DashboardData]:
        return await asyncio.gather(cache.refresh(), cache.refresh())

    first, second = asyncio.run(_scenario())

    assert reader.calls == {source_id: 1 for source_id in SOURCE_IDS}
    assert first.timeline is second.timeline
