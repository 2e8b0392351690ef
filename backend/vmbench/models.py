"""Pydantic models for benchmark payloads, rendered rows and phase messages."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StatSnapshot(BaseModel):
    """Serializable shape of a single accumulated statistic."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    executions: int = Field(default=0, ge=0)
    self_time: float = Field(default=0.0, ge=0.0, alias="selfTime", description="Accumulated self time in ms")
    total_time: float = Field(default=0.0, ge=0.0, alias="totalTime", description="Accumulated total time in ms")


class Fixture(BaseModel):
    """Parameters a benchmark was recorded with."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(..., alias="projectId")
    warm_up_time: int = Field(..., ge=0, alias="warmUpTime")
    recording_time: int = Field(..., gt=0, alias="recordingTime")


class BenchmarkPayload(BaseModel):
    """Snapshot of a finished run, shared through the ``#view/`` link."""

    model_config = ConfigDict(populate_by_name=True)

    fixture: Fixture
    frames: List[StatSnapshot] = Field(default_factory=list)
    opcodes: Dict[str, StatSnapshot] = Field(default_factory=dict)

    @field_validator("frames")
    @classmethod
    def ensure_unique_frames(cls, value: List[StatSnapshot]) -> List[StatSnapshot]:
        """Frames are keyed by name, so a name may only appear once."""

        seen = set()
        for item in value:
            if item.name in seen:
                raise ValueError(f"duplicate frame '{item.name}' in payload")
            seen.add(item.name)
        return value


class TableRow(BaseModel):
    """One rendered line of a statistics table."""

    name: str
    self_time: str = Field(..., description="Seconds with three decimals, or '---'")
    total_time: str = Field(..., description="Seconds with three decimals, or '---'")
    executions: int
    slow: bool = False


class RunningStatsSnapshot(BaseModel):
    """Live counters shown while a run is recording."""

    steps: int = 0
    blocks: int = 0
    recorded_time: str = Field(default="0.000", description="Recorded seconds, three decimals")
    progress: float = Field(default=0.0, ge=0.0, le=100.0, description="Percent of the recording window")


class LoadingSnapshot(BaseModel):
    """Display values for project loading progress."""

    data_total: int = 1
    data_loaded: int = 0
    data_time: str = ""
    content_total: int = 0
    content_complete: int = 0
    content_time: str = ""
    hydrate_total: int = 0
    hydrate_complete: int = 0
    hydrate_time: str = ""
    memory_current: Optional[str] = None
    memory_peak: Optional[str] = None


class MessageType(str, Enum):
    LOADING = "BENCH_MESSAGE_LOADING"
    WARMING_UP = "BENCH_MESSAGE_WARMING_UP"
    ACTIVE = "BENCH_MESSAGE_ACTIVE"
    COMPLETE = "BENCH_MESSAGE_COMPLETE"


class BenchMessage(BaseModel):
    """Phase notification posted to the hosting context."""

    type: MessageType
    frames: Optional[List[StatSnapshot]] = None
    opcodes: Optional[Dict[str, StatSnapshot]] = None
