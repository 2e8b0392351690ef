"""Table rendering."""

from .tables import SLOW_THRESHOLD, FramesTable, OpcodeTable, RunningStatsView, StatTable

__all__ = ["SLOW_THRESHOLD", "FramesTable", "OpcodeTable", "RunningStatsView", "StatTable"]
