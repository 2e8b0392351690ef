"""Statistic accumulators."""

from .view import StatView, format_seconds, validate_sample
from .aggregators import Frames, Opcodes, RunningStats

__all__ = ["Frames", "Opcodes", "RunningStats", "StatView", "format_seconds", "validate_sample"]
