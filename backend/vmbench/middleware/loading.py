"""Tracks project loading progress through loader interceptors."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

import psutil

from ..engine import Engine, InterceptableLoader
from ..models import LoadingSnapshot
from ..utils.timeline import LoadTimeline
from .chain import settle

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[["LoadingProgress"], None]


def process_memory() -> Optional[int]:
    """Resident set size of this process in bytes, or ``None`` if it cannot be read."""

    try:
        return psutil.Process().memory_info().rss
    except psutil.Error as exc:
        LOGGER.debug("Memory sample unavailable: %s", exc)
        return None


class LoadingProgress:
    """Counts downloads and asset hydration while a project loads.

    The first call through the data loader is the project file itself; every
    later call is a content download. Costume and sound loads are hydration.
    ``callback`` receives this object after every counter change.
    """

    def __init__(
        self,
        callback: ProgressCallback,
        timeline: Optional[LoadTimeline] = None,
        memory_sampler: Optional[Callable[[], Optional[int]]] = None,
    ) -> None:
        self.data_loaded = 0
        self.content_total = 0
        self.content_complete = 0
        self.hydrate_total = 0
        self.hydrate_complete = 0
        self.memory_current = 0
        self.memory_peak = 0
        self.callback = callback
        self.timeline = timeline or LoadTimeline()
        self._memory_sampler = memory_sampler or process_memory

    def sample_memory(self) -> None:
        current = self._memory_sampler()
        if current is None:
            return
        self.memory_current = current
        self.memory_peak = max(current, self.memory_peak)

    def on(
        self,
        costume_loader: InterceptableLoader,
        sound_loader: InterceptableLoader,
        data_loader: InterceptableLoader,
        engine: Engine,
    ) -> "LoadingProgress":
        self.attach_hydrate_middleware(costume_loader)
        self.attach_hydrate_middleware(sound_loader)
        data_loader.on_before_load(self._load_data)
        engine.on_project_loaded(self._project_loaded)
        return self

    def attach_hydrate_middleware(self, loader: InterceptableLoader) -> None:
        loader.on_before_load(self._hydrate)

    def snapshot(self) -> LoadingSnapshot:
        timeline = self.timeline
        snapshot = LoadingSnapshot(
            data_loaded=self.data_loaded,
            data_time=timeline.since_load_start("LoadDataEnd"),
            content_total=self.content_total,
            content_complete=self.content_complete,
            content_time=timeline.since_load_start("DownloadEnd"),
            hydrate_total=self.hydrate_total,
            hydrate_complete=self.hydrate_complete,
            hydrate_time=timeline.since_load_start("LoadEnd"),
        )
        if self.memory_peak:
            snapshot.memory_current = f"{self.memory_current / 1000000:.0f}MB"
            snapshot.memory_peak = f"{self.memory_peak / 1000000:.0f}MB"
        return snapshot

    def _report(self) -> None:
        self.sample_memory()
        self.callback(self)

    async def _after(self, result: Any, on_done: Callable[[], None]) -> Any:
        value = await settle(result)
        on_done()
        return value

    def _hydrate(self, args: list, next_: Callable[[list], Any]) -> Awaitable[Any]:
        self.hydrate_total += 1
        self._report()
        return self._after(next_(args), self._hydrated)

    def _hydrated(self) -> None:
        self.hydrate_complete += 1
        LOGGER.debug("Hydrated %s/%s assets", self.hydrate_complete, self.hydrate_total)
        self._report()

    def _load_data(self, args: list, next_: Callable[[list], Any]) -> Awaitable[Any]:
        is_project_data = self.data_loaded == 0
        if is_project_data and self.timeline.get("LoadDataStart") is None:
            self.timeline.mark("LoadDataStart")

        result = next_(args)

        if not is_project_data:
            if self.content_total == 0:
                self.timeline.mark("DownloadStart")
            self.content_total += 1
        self._report()
        return self._after(result, lambda: self._data_settled(is_project_data))

    def _data_settled(self, is_project_data: bool) -> None:
        if is_project_data:
            if not self.data_loaded:
                self.timeline.mark("LoadDataEnd")
                self.timeline.measure("LoadData", "LoadDataStart", "LoadDataEnd")
                self.data_loaded = 1
                LOGGER.debug("Project data loaded")
        else:
            self.content_complete += 1

        if self.content_complete and self.content_complete == self.content_total:
            self.timeline.mark("DownloadEnd")
            self.timeline.measure("Download", "DownloadStart", "DownloadEnd")
            LOGGER.debug("Downloaded %s assets", self.content_total)

        self._report()

    def _project_loaded(self) -> None:
        self.timeline.mark("LoadEnd")
        self.timeline.measure("Load", "LoadStart", "LoadEnd")
        LOGGER.info("Project loaded: %s", self.timeline.snapshot())
        self._report()
