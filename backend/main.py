"""FastAPI entrypoint serving shared benchmark results."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from vmbench.config import get_settings
from vmbench.errors import PayloadDecodeError
from vmbench.models import BenchmarkPayload, Fixture
from vmbench.services import ProfilerRun, decode_payload, parse_location_hash, share_link

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
LOGGER = logging.getLogger(__name__)

app = FastAPI(title="VM Benchmark Viewer", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/share")
async def share(payload: BenchmarkPayload) -> Dict[str, str]:
    """Encode a finished run into a ``#view/`` link."""

    return {"link": share_link(payload)}


@app.get("/view/{data:path}")
async def view(data: str) -> Dict[str, Any]:
    """Replay a shared run and return its rendered tables."""

    try:
        payload = decode_payload(data)
    except PayloadDecodeError as exc:
        LOGGER.info("Rejected share data: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    replay = ProfilerRun.for_replay().render(payload)
    return {
        "fixture": payload.fixture.model_dump(by_alias=True),
        "frames": [row.model_dump() for row in replay.frame_rows],
        "opcodes": [row.model_dump() for row in replay.opcode_rows],
    }


@app.get("/fixture")
async def fixture(location_hash: str = Query(default="", alias="hash")) -> Fixture:
    """Parse a ``#project,warmUp,recording`` location hash."""

    return parse_location_hash(location_hash)


@app.get("/health")
async def healthcheck() -> Dict[str, Any]:
    """Simple health endpoint useful during development."""

    return {"status": "ok"}
