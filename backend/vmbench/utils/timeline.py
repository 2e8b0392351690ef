"""Named load timestamps and the durations measured between them."""

from __future__ import annotations

from time import perf_counter
from typing import Callable, Dict, Optional


def _wall_ms() -> float:
    return perf_counter() * 1000.0


class LoadTimeline:
    """Collects marks (in milliseconds) for a single project load.

    One instance is handed to everything that reports loading progress, so
    load start and end times are never kept in module globals.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or _wall_ms
        self._marks: Dict[str, float] = {}
        self._measures: Dict[str, float] = {}
        self.load_start = self.mark("LoadStart")

    def now(self) -> float:
        return self._clock()

    def mark(self, name: str) -> float:
        """Record the current time under ``name``, replacing an earlier mark."""

        value = self.now()
        self._marks[name] = value
        return value

    def get(self, name: str) -> Optional[float]:
        return self._marks.get(name)

    def measure(self, name: str, start: str, end: str) -> Optional[float]:
        """Store and return the duration between two marks, if both exist."""

        started = self._marks.get(start)
        ended = self._marks.get(end)
        if started is None or ended is None:
            return None
        duration = ended - started
        self._measures[name] = duration
        return duration

    def since_load_start(self, name: str) -> str:
        """Elapsed time from load start to ``name``, or to now when unmarked."""

        marked = self._marks.get(name)
        end = marked if marked is not None else self.now()
        return f"({int(end - self.load_start)}ms)"

    def snapshot(self) -> Dict[str, int]:
        """Return measured durations rounded to millisecond integers."""

        return {key: int(value) for key, value in self._measures.items()}
