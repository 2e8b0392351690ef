"""Pytest configuration for backend tests."""

import sys
from pathlib import Path

import pytest


def ensure_backend_on_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


ensure_backend_on_path()

from vmbench.config import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    """Settings pinned to the documented defaults, independent of the environment."""

    return Settings(
        warm_up_time=4000,
        max_recorded_time=6000,
        pre_roll=100,
        slow_threshold=0.1,
        default_project_id="default_project",
    )
