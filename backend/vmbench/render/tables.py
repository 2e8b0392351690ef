"""Table projections of aggregated statistics."""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from ..config import SLOW_THRESHOLD, get_settings
from ..models import RunningStatsSnapshot, TableRow
from ..stats.aggregators import Frames, Opcodes, RunningStats
from ..stats.view import StatView

LOGGER = logging.getLogger(__name__)

K = TypeVar("K")


class StatTable(Generic[K]):
    """Re-renders every row of ``table`` from the current key ordering."""

    def __init__(
        self,
        table: List[TableRow],
        keys: Callable[[], Sequence[K]],
        view_of: Callable[[K], Optional[StatView]],
        is_slow: Callable[[K, StatView], bool],
    ) -> None:
        self.table = table
        self.keys = keys
        self.view_of = view_of
        self.is_slow = is_slow

    def render(self) -> List[TableRow]:
        table = self.table
        table.clear()
        for key in self.keys():
            view = self.view_of(key)
            if view is None:
                LOGGER.warning("No statistic for key %r; row skipped", key)
                continue
            view.render(table, lambda frame, key=key: self.is_slow(key, frame))
        return table


class FramesTable:
    """Frame statistics ordered by descending self time."""

    def __init__(self, table: List[TableRow], frames: Frames, slow_threshold: Optional[float] = None) -> None:
        self.table = table
        self.frames = frames
        self.slow_threshold = _threshold(slow_threshold)

    def render(self) -> List[TableRow]:
        ordered = sorted(self.frames.frames, key=lambda frame: frame.self_time, reverse=True)
        keys = [frame.name for frame in ordered]

        return StatTable(
            table=self.table,
            keys=lambda: keys,
            view_of=self.frames.find,
            is_slow=lambda key, frame: frame.self_time > self.slow_threshold,
        ).render()


class OpcodeTable:
    """Opcode statistics ordered by descending self time."""

    def __init__(self, table: List[TableRow], opcodes: Opcodes, slow_threshold: Optional[float] = None) -> None:
        self.table = table
        self.opcodes = opcodes
        self.slow_threshold = _threshold(slow_threshold)

    def render(self) -> List[TableRow]:
        stats = self.opcodes.opcodes
        keys = sorted(stats, key=lambda opcode: stats[opcode].self_time, reverse=True)

        return StatTable(
            table=self.table,
            keys=lambda: keys,
            view_of=stats.get,
            is_slow=lambda key, frame: frame.self_time > self.slow_threshold,
        ).render()


class RunningStatsView:
    """Live step/block counters and recording progress."""

    def __init__(
        self,
        running_stats: RunningStats,
        max_recorded_time: float,
        on_render: Optional[Callable[[RunningStatsSnapshot], None]] = None,
    ) -> None:
        if max_recorded_time <= 0:
            raise ValueError(f"max_recorded_time must be positive, got {max_recorded_time}")
        self.running_stats = running_stats
        self.max_recorded_time = max_recorded_time
        self.on_render = on_render
        self.latest = RunningStatsSnapshot()

    def progress(self) -> float:
        """Percent of the recording window already recorded, capped at 100."""

        return min(self.running_stats.recorded_time / self.max_recorded_time, 1) * 100

    def render(self) -> RunningStatsSnapshot:
        stats = self.running_stats
        self.latest = RunningStatsSnapshot(
            steps=stats.executed.steps,
            blocks=stats.executed.blocks,
            recorded_time=f"{stats.recorded_time / 1000:.3f}",
            progress=self.progress(),
        )
        if self.on_render is not None:
            self.on_render(self.latest)
        return self.latest


def _threshold(slow_threshold: Optional[float]) -> float:
    return get_settings().slow_threshold if slow_threshold is None else slow_threshold
