from unittest.mock import patch

import pytest

from fakes import FakeProfiler

from vmbench.config import Settings
from vmbench.render import SLOW_THRESHOLD, FramesTable, OpcodeTable, RunningStatsView, StatTable
from vmbench.stats import Frames, Opcodes, RunningStats, StatView


def build_frames():
    profiler = FakeProfiler()
    frames = Frames(profiler)
    frames.update(profiler.record("execute", 0.05, 1.0))
    frames.update(profiler.record("blockFunction", 12.0, 20.0, count=3))
    frames.update(profiler.record("Runtime._step", 0.5, 40.0))
    return frames


def test_frames_table_sorts_by_descending_self_time():
    rows = []
    FramesTable(rows, build_frames()).render()

    assert [row.name for row in rows] == ["blockFunction", "Runtime._step", "execute"]


def test_slow_flag_compares_raw_self_time_against_threshold():
    rows = []
    FramesTable(rows, build_frames()).render()

    flags = {row.name: row.slow for row in rows}
    assert SLOW_THRESHOLD == 0.1
    assert flags == {"blockFunction": True, "Runtime._step": True, "execute": False}


def test_default_threshold_comes_from_settings():
    with patch("vmbench.render.tables.get_settings") as mock_settings:
        mock_settings.return_value = Settings(slow_threshold=1.0)
        rows = FramesTable([], build_frames()).render()

    flags = {row.name: row.slow for row in rows}
    assert flags == {"blockFunction": True, "Runtime._step": False, "execute": False}


def test_explicit_threshold_overrides_settings():
    rows = FramesTable([], build_frames(), slow_threshold=20.0).render()

    assert not any(row.slow for row in rows)


def test_render_replaces_previous_rows():
    rows = []
    frames = build_frames()
    table = FramesTable(rows, frames)
    table.render()
    table.render()

    assert len(rows) == 3


def test_opcode_table_orders_opcode_map():
    opcodes = Opcodes()
    profiler = FakeProfiler()
    opcodes.update(profiler.record("blockFunction", 0.2, 0.2, opcode="looks_say"))
    opcodes.update(profiler.record("blockFunction", 3.0, 3.0, opcode="motion_movesteps"))

    rows = OpcodeTable([], opcodes).render()

    assert [row.name for row in rows] == ["motion_movesteps", "looks_say"]


def test_stat_table_skips_keys_without_a_view():
    views = {"known": StatView("known")}
    rows = StatTable(
        table=[],
        keys=lambda: ["known", "missing"],
        view_of=views.get,
        is_slow=lambda key, view: False,
    ).render()

    assert [row.name for row in rows] == ["known"]


def running_view(recorded_time, max_recorded_time=6000):
    stats = RunningStats(FakeProfiler())
    stats.recorded_time = recorded_time
    return RunningStatsView(stats, max_recorded_time)


def test_progress_starts_at_zero():
    assert running_view(0).render().progress == 0


def test_progress_is_clamped_to_one_hundred_percent():
    assert running_view(9000).render().progress == 100


def test_progress_midway():
    snapshot = running_view(1500).render()

    assert snapshot.progress == pytest.approx(25.0)
    assert snapshot.recorded_time == "1.500"


@pytest.mark.parametrize("max_recorded_time", [0, -10])
def test_non_positive_recording_window_is_rejected(max_recorded_time):
    with pytest.raises(ValueError):
        running_view(0, max_recorded_time)


def test_render_pushes_snapshot_to_listener():
    seen = []
    stats = RunningStats(FakeProfiler())
    stats.executed.steps = 3
    view = RunningStatsView(stats, 6000, on_render=seen.append)

    view.render()

    assert seen == [view.latest]
    assert view.latest.steps == 3
