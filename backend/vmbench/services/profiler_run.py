"""Orchestrates one profiling session against a block-execution engine."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..clock import AsyncioScheduler, Scheduler, TimerHandle
from ..config import Settings, get_settings
from ..engine import Engine, EngineProfiler, FrameRecord
from ..errors import EngineAttachError, InvalidSampleError, RunStateError
from ..models import BenchMessage, BenchmarkPayload, Fixture, MessageType, RunningStatsSnapshot, StatSnapshot, TableRow
from ..render import FramesTable, OpcodeTable, RunningStatsView
from ..stats import Frames, Opcodes, RunningStats, StatView, validate_sample
from .share import share_link

LOGGER = logging.getLogger(__name__)

STEP_FRAME = "Runtime._step"


class Phase(str, Enum):
    LOADING = "loading"
    WARMING_UP = "warming_up"
    ACTIVE = "active"
    COMPLETE = "complete"
    DISPOSED = "disposed"


_ORDER = [Phase.LOADING, Phase.WARMING_UP, Phase.ACTIVE, Phase.COMPLETE]


class RunMode(str, Enum):
    LIVE = "live"
    REPLAY = "replay"


class ProfilerRun:
    """Drives a run through loading, warm-up, recording and completion.

    A run built with an engine is LIVE: ``run()`` waits for the engine's
    workspace-ready signal, then schedules every phase from that single
    reference point. A run built through ``for_replay()`` only rebuilds tables
    from a stored payload with ``render()``.
    """

    def __init__(
        self,
        engine: Optional[Engine],
        project_id: Optional[str] = None,
        warm_up_time: Optional[int] = None,
        max_recorded_time: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        notify: Optional[Callable[[BenchMessage], None]] = None,
        on_running_stats: Optional[Callable[[RunningStatsSnapshot], None]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self.engine = engine
        self.mode = RunMode.LIVE if engine is not None else RunMode.REPLAY
        self.project_id = project_id or settings.default_project_id
        self.warm_up_time = settings.warm_up_time if warm_up_time is None else warm_up_time
        self.max_recorded_time = settings.max_recorded_time if max_recorded_time is None else max_recorded_time
        self.pre_roll = settings.pre_roll
        self.scheduler = scheduler or AsyncioScheduler()
        self.notify = notify
        self.phase = Phase.LOADING
        self.error: Optional[BaseException] = None
        self.payload: Optional[BenchmarkPayload] = None
        self.share_link: Optional[str] = None
        self.frame_rows: List[TableRow] = []
        self.opcode_rows: List[TableRow] = []
        self._started = False
        self._timers: List[TimerHandle] = []
        self._done = asyncio.Event()

        if self.warm_up_time < 0:
            raise ValueError(f"warm_up_time must not be negative, got {self.warm_up_time}")
        if self.max_recorded_time <= 0:
            raise ValueError(f"max_recorded_time must be positive, got {self.max_recorded_time}")

        self.profiler: Optional[EngineProfiler] = None
        self.running_stats: Optional[RunningStats] = None
        self.running_stats_view: Optional[RunningStatsView] = None
        self._step_id: Optional[int] = None

        if engine is not None:
            profiler = self.profiler = self._engine_call("enable_profiling", engine.enable_profiling)
            if profiler is None:
                raise EngineAttachError("engine did not provide a profiler")
            # Keep the callback slot empty until recording starts.
            self._engine_call("attach_profiler", engine.attach_profiler, None)

            self.running_stats = RunningStats(profiler)
            self.running_stats_view = RunningStatsView(
                self.running_stats,
                self.max_recorded_time,
                on_render=on_running_stats,
            )
            self._step_id = profiler.id_by_name(STEP_FRAME)
            profiler.on_frame = self._on_frame

        self.frames = Frames(self.profiler)
        self.opcodes = Opcodes()
        self.frame_table = FramesTable(self.frame_rows, self.frames, settings.slow_threshold)
        self.opcode_table = OpcodeTable(self.opcode_rows, self.opcodes, settings.slow_threshold)

    @classmethod
    def for_replay(cls, settings: Optional[Settings] = None) -> "ProfilerRun":
        return cls(engine=None, settings=settings)

    @property
    def fixture(self) -> Fixture:
        return Fixture(
            project_id=self.project_id,
            warm_up_time=self.warm_up_time,
            recording_time=self.max_recorded_time,
        )

    def run(self) -> None:
        """Announce loading and wait for the engine's workspace-ready signal."""

        self._require(RunMode.LIVE, "run")
        if self._started:
            raise RunStateError("run() may only be called once per ProfilerRun")
        self._started = True

        LOGGER.info(
            "Profiling %s (warm-up %sms, recording %sms)",
            self.project_id,
            self.warm_up_time,
            self.max_recorded_time,
        )
        self._post(BenchMessage(type=MessageType.LOADING))
        self._engine_call("on_workspace_ready", self.engine.on_workspace_ready, self._on_workspace_ready)

    async def wait_complete(self) -> BenchmarkPayload:
        """Wait for the run to finish and return its payload."""

        await self._done.wait()
        if self.error is not None:
            raise self.error
        if self.payload is None:
            raise RunStateError(f"run for {self.project_id} was disposed before completing")
        return self.payload

    def dispose(self) -> None:
        """Stop reacting to timers. Transitions that fire later are no-ops."""

        if self.phase is Phase.DISPOSED:
            return
        previous = self.phase
        self.phase = Phase.DISPOSED
        LOGGER.info("Run %s disposed during %s", self.project_id, previous.value)
        try:
            if previous is Phase.ACTIVE and self.engine is not None:
                self._engine_call("attach_profiler", self.engine.attach_profiler, None)
        finally:
            self._done.set()

    def render(self, payload: BenchmarkPayload) -> "ProfilerRun":
        """Rebuild both tables from a stored payload without running anything."""

        self._require(RunMode.REPLAY, "render")
        fixture = payload.fixture
        self.project_id = fixture.project_id
        self.warm_up_time = fixture.warm_up_time
        self.max_recorded_time = fixture.recording_time

        self.frames.frames = [StatView.from_snapshot(frame) for frame in payload.frames]
        self.opcodes.opcodes = {
            opcode: StatView.from_snapshot(data) for opcode, data in payload.opcodes.items()
        }
        self._render_tables()

        self.payload = payload
        self.share_link = share_link(payload)
        self.phase = Phase.COMPLETE
        self._done.set()
        return self

    def frames_snapshot(self) -> List[StatSnapshot]:
        return [frame.snapshot() for frame in self.frames.frames]

    def opcodes_snapshot(self) -> Dict[str, StatSnapshot]:
        return {opcode: stat.snapshot() for opcode, stat in self.opcodes.opcodes.items()}

    def _on_workspace_ready(self) -> None:
        if self.phase is not Phase.LOADING or self._timers:
            return

        warm_up_at = self.pre_roll
        active_at = warm_up_at + self.warm_up_time
        complete_at = active_at + self.max_recorded_time
        LOGGER.debug("Workspace ready; phases at +%s/+%s/+%sms", warm_up_at, active_at, complete_at)

        try:
            for delay, target in (
                (warm_up_at, Phase.WARMING_UP),
                (active_at, Phase.ACTIVE),
                (complete_at, Phase.COMPLETE),
            ):
                self._timers.append(
                    self.scheduler.call_later(delay, lambda target=target: self._advance_to(target))
                )
        except Exception as exc:
            self._fail(exc)
            raise

    def _advance_to(self, target: Phase) -> None:
        """Step forward to ``target``, entering any skipped phase on the way."""

        while self.phase is not Phase.DISPOSED and _ORDER.index(self.phase) < _ORDER.index(target):
            self.phase = _ORDER[_ORDER.index(self.phase) + 1]
            LOGGER.info("Run %s entered %s", self.project_id, self.phase.value)
            try:
                self._enter(self.phase)
            except Exception as exc:
                self._fail(exc)
                return

    def _enter(self, phase: Phase) -> None:
        engine = self.engine
        if phase is Phase.WARMING_UP:
            self._post(BenchMessage(type=MessageType.WARMING_UP))
            self._engine_call("green_flag", engine.green_flag)
        elif phase is Phase.ACTIVE:
            self._post(BenchMessage(type=MessageType.ACTIVE))
            self._engine_call("attach_profiler", engine.attach_profiler, self.profiler)
        elif phase is Phase.COMPLETE:
            self._complete()

    def _complete(self) -> None:
        engine = self.engine
        try:
            self._engine_call("stop_all", engine.stop_all)
            self._engine_call("cancel_stepping", engine.cancel_stepping)
        finally:
            # No frame may reach the aggregators once the run is over.
            self._engine_call("attach_profiler", engine.attach_profiler, None)

        self._render_tables()

        frames = self.frames_snapshot()
        opcodes = self.opcodes_snapshot()
        self._post(BenchMessage(type=MessageType.COMPLETE, frames=frames, opcodes=opcodes))

        self.payload = BenchmarkPayload(fixture=self.fixture, frames=frames, opcodes=opcodes)
        self.share_link = share_link(self.payload)
        LOGGER.info(
            "Run %s complete: %s frames, %s opcodes",
            self.project_id,
            len(frames),
            len(opcodes),
        )
        self._done.set()

    def _on_frame(self, record: FrameRecord) -> None:
        try:
            validate_sample(record.self_time, record.total_time, record.count)
        except InvalidSampleError as exc:
            LOGGER.warning("Dropping frame %s: %s", record.id, exc)
            return

        if self._step_id is not None and record.id == self._step_id:
            self.running_stats_view.render()

        self.running_stats.update(record)
        self.opcodes.update(record)
        self.frames.update(record)

    def _render_tables(self) -> None:
        for table in (self.frame_table, self.opcode_table):
            try:
                table.render()
            except ValueError:
                LOGGER.exception("Failed to render %s", type(table).__name__)

    def _post(self, message: BenchMessage) -> None:
        LOGGER.debug("Posting %s", message.type.value)
        if self.notify is not None:
            self.notify(message)

    def _fail(self, exc: BaseException) -> None:
        LOGGER.exception("Run %s failed during %s", self.project_id, self.phase.value)
        self.error = exc
        self.phase = Phase.DISPOSED
        self._done.set()

    def _require(self, mode: RunMode, operation: str) -> None:
        if self.mode is not mode:
            raise RunStateError(f"{operation}() is not available on a {self.mode.value} run")

    @staticmethod
    def _engine_call(name: str, action: Callable[..., Any], *args: Any) -> Any:
        try:
            return action(*args)
        except Exception as exc:
            raise EngineAttachError(f"engine call '{name}' failed: {exc}") from exc
