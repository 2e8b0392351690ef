"""Aggregators fed from the engine's frame stream during a run."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..engine import EngineProfiler, FrameRecord
from .view import StatView

LOGGER = logging.getLogger(__name__)

STEP_THREADS = "Sequencer.stepThreads"
STEP_THREADS_INNER = "Sequencer.stepThreads#inner"
BLOCK_FUNCTION = "blockFunction"


class Frames:
    """Per-name statistics, in order of first appearance."""

    def __init__(self, profiler: Optional[EngineProfiler]) -> None:
        self.profiler = profiler
        self.frames: List[StatView] = []

    def find(self, name: str) -> Optional[StatView]:
        for frame in self.frames:
            if frame.name == name:
                return frame
        return None

    def update(self, record: FrameRecord) -> None:
        name = self.profiler.name_by_id(record.id)
        frame = self.find(name)
        if frame is None:
            frame = StatView(name)
            self.frames.append(frame)
        frame.update(record.self_time, record.total_time, record.count)


class Opcodes:
    """Per-opcode statistics for block-call frames."""

    def __init__(self) -> None:
        self.opcodes: Dict[str, StatView] = {}

    def update(self, record: FrameRecord) -> None:
        opcode = record.opcode
        if not opcode:
            return
        stat = self.opcodes.get(opcode)
        if stat is None:
            stat = StatView(opcode)
            self.opcodes[opcode] = stat
        stat.update(record.self_time, record.total_time, record.count)


class Executed:
    def __init__(self) -> None:
        self.steps = 0
        self.blocks = 0


class RunningStats:
    """Run-level counters taken from three fixed engine call sites.

    Ids are resolved once. An anchor the profiler cannot resolve stays
    ``None`` and never matches, so its counter simply stays at zero.
    """

    def __init__(self, profiler: EngineProfiler) -> None:
        self.step_threads_inner_id = profiler.id_by_name(STEP_THREADS_INNER)
        self.block_function_id = profiler.id_by_name(BLOCK_FUNCTION)
        self.step_threads_id = profiler.id_by_name(STEP_THREADS)

        for name, frame_id in (
            (STEP_THREADS, self.step_threads_id),
            (STEP_THREADS_INNER, self.step_threads_inner_id),
            (BLOCK_FUNCTION, self.block_function_id),
        ):
            if frame_id is None:
                LOGGER.warning("Profiler has no id for '%s'; its counter stays at zero", name)

        self.recorded_time = 0.0
        self.executed = Executed()

    def update(self, record: FrameRecord) -> None:
        frame_id = record.id
        if frame_id is None:
            return
        if frame_id == self.step_threads_id:
            self.recorded_time += record.total_time
        elif frame_id == self.step_threads_inner_id:
            self.executed.steps += record.count
        elif frame_id == self.block_function_id:
            self.executed.blocks += record.count
