"""Accumulated timing statistic for one call site."""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from ..errors import InvalidSampleError
from ..models import StatSnapshot, TableRow

PLACEHOLDER = "---"


def format_seconds(milliseconds: float) -> str:
    """Truncate to thousandths of a millisecond and format as seconds."""

    truncated = math.floor(milliseconds * 1000) / 1000
    if truncated > 0:
        return f"{truncated / 1000:.3f}"
    return PLACEHOLDER


def validate_sample(self_time: float, total_time: float, count: int) -> None:
    """Reject negative durations or counts, which only a faulty producer emits."""

    if self_time < 0 or total_time < 0 or count < 0:
        raise InvalidSampleError(f"negative sample: self={self_time} total={total_time} count={count}")


class StatView:
    """Self time, total time (both ms) and execution count for ``name``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.executions = 0
        self.self_time = 0.0
        self.total_time = 0.0

    def update(self, self_time: float, total_time: float, count: int) -> None:
        validate_sample(self_time, total_time, count)
        self.executions += count
        self.self_time += self_time
        self.total_time += total_time

    def render(self, table: List[TableRow], is_slow: Callable[["StatView"], bool]) -> TableRow:
        row = TableRow(
            name=self.name,
            self_time=format_seconds(self.self_time),
            total_time=format_seconds(self.total_time),
            executions=self.executions,
            slow=bool(is_slow(self)),
        )
        table.append(row)
        return row

    def snapshot(self) -> StatSnapshot:
        return StatSnapshot(
            name=self.name,
            executions=self.executions,
            self_time=self.self_time,
            total_time=self.total_time,
        )

    @classmethod
    def from_snapshot(cls, snapshot: StatSnapshot, name: Optional[str] = None) -> "StatView":
        view = cls(name if name is not None else snapshot.name)
        view.executions = snapshot.executions
        view.self_time = snapshot.self_time
        view.total_time = snapshot.total_time
        return view

    def __repr__(self) -> str:
        return (
            f"StatView(name={self.name!r}, executions={self.executions}, "
            f"self_time={self.self_time}, total_time={self.total_time})"
        )
