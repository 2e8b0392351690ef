from fakes import FakeProfiler

from vmbench.engine import BlockCall, FrameRecord, Step
from vmbench.stats import Frames, Opcodes, RunningStats


def test_frames_with_same_resolved_name_share_one_view():
    # Two distinct ids that resolve to the same display name.
    profiler = FakeProfiler(["execute", "blockFunction"], aliases={7: "execute"})
    frames = Frames(profiler)

    frames.update(FrameRecord(0, Step(), 1.0, 2.0, 1))
    frames.update(FrameRecord(7, Step(), 0.5, 0.5, 2))
    frames.update(FrameRecord(1, Step(), 3.0, 3.0, 1))

    assert [frame.name for frame in frames.frames] == ["execute", "blockFunction"]
    execute = frames.find("execute")
    assert execute.executions == 3
    assert execute.self_time == 1.5


def test_opcodes_are_keyed_independently_and_steps_are_ignored():
    opcodes = Opcodes()

    opcodes.update(FrameRecord(3, BlockCall("motion_movesteps"), 0.2, 0.4, 1))
    opcodes.update(FrameRecord(3, BlockCall("looks_say"), 0.1, 0.1, 1))
    opcodes.update(FrameRecord(3, BlockCall("motion_movesteps"), 0.3, 0.6, 2))
    opcodes.update(FrameRecord(0, Step(), 9.0, 9.0, 1))

    assert set(opcodes.opcodes) == {"motion_movesteps", "looks_say"}
    assert opcodes.opcodes["motion_movesteps"].executions == 3
    assert opcodes.opcodes["looks_say"].executions == 1


def test_running_stats_tracks_the_three_anchor_sites():
    profiler = FakeProfiler()
    stats = RunningStats(profiler)

    stats.update(profiler.record("Sequencer.stepThreads", 1.0, 16.5))
    stats.update(profiler.record("Sequencer.stepThreads#inner", 0.5, 10.0, count=4))
    stats.update(profiler.record("blockFunction", 0.1, 0.2, count=12, opcode="looks_say"))
    stats.update(profiler.record("execute", 5.0, 5.0, count=100))

    assert stats.recorded_time == 16.5
    assert stats.executed.steps == 4
    assert stats.executed.blocks == 12


def test_running_stats_ignores_unresolvable_anchor():
    profiler = FakeProfiler(["Sequencer.stepThreads", "execute"])
    stats = RunningStats(profiler)

    assert stats.block_function_id is None
    stats.update(FrameRecord(1, Step(), 1.0, 1.0, 5))
    stats.update(FrameRecord(0, Step(), 1.0, 8.0, 1))

    assert stats.executed.blocks == 0
    assert stats.executed.steps == 0
    assert stats.recorded_time == 8.0
