"""Collaborator surface consumed from the block-execution engine.

The harness never implements the engine. It only reads symbol ids from the
engine's profiler, installs a frame callback on it, and drives a handful of
lifecycle actions. Anything satisfying these protocols can be profiled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Union

Interceptor = Callable[[list, Callable[[list], Any]], Any]


@dataclass(frozen=True)
class Step:
    """Frame emitted by the engine's own scheduling code."""


@dataclass(frozen=True)
class BlockCall:
    """Frame emitted while executing a single block."""

    opcode: str


FrameKind = Union[Step, BlockCall]


@dataclass(frozen=True)
class FrameRecord:
    """One profiler sample. ``self_time`` and ``total_time`` are in ms."""

    id: int
    kind: FrameKind
    self_time: float
    total_time: float
    count: int

    @property
    def opcode(self) -> Optional[str]:
        if isinstance(self.kind, BlockCall):
            return self.kind.opcode
        return None


FrameCallback = Callable[[FrameRecord], None]


class EngineProfiler(Protocol):
    on_frame: Optional[FrameCallback]

    def id_by_name(self, name: str) -> Optional[int]: ...

    def name_by_id(self, frame_id: int) -> str: ...


class Engine(Protocol):
    def enable_profiling(self) -> EngineProfiler: ...

    def attach_profiler(self, profiler: Optional[EngineProfiler]) -> None: ...

    def on_workspace_ready(self, callback: Callable[[], None]) -> None: ...

    def on_project_loaded(self, callback: Callable[[], None]) -> None: ...

    def green_flag(self) -> None: ...

    def stop_all(self) -> None: ...

    def cancel_stepping(self) -> None: ...


class InterceptableLoader(Protocol):
    """Asset loader that accepts interceptors instead of being monkey-patched."""

    def on_before_load(self, interceptor: Interceptor) -> None: ...

    def __call__(self, *args: Any) -> Any: ...
