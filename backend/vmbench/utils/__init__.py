"""Utility helpers for the benchmark harness."""

from .timeline import LoadTimeline

__all__ = ["LoadTimeline"]
