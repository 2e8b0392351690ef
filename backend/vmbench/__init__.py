"""Profiling harness for a block-execution engine.

Hooks asset loaders and the engine's per-frame profiler callback, aggregates
self/total time and execution counts per call site and per opcode, and renders
or shares the results.
"""

from .services import ProfilerRun

__all__ = ["ProfilerRun"]
