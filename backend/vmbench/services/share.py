"""Share-link encoding and location-hash parsing for benchmark runs."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import PayloadDecodeError
from ..models import BenchmarkPayload, Fixture

LOGGER = logging.getLogger(__name__)

VIEW_PREFIX = "view/"


def encode_payload(payload: BenchmarkPayload) -> str:
    """Serialize ``payload`` to compact JSON and base64 it."""

    raw = payload.model_dump_json(by_alias=True)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_payload(data: str) -> BenchmarkPayload:
    """Reverse :func:`encode_payload`. Any failure raises ``PayloadDecodeError``."""

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PayloadDecodeError(f"share data is not valid base64: {exc}") from exc

    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise PayloadDecodeError(f"share data is not valid JSON: {exc}") from exc

    try:
        return BenchmarkPayload.model_validate(decoded)
    except ValidationError as exc:
        raise PayloadDecodeError(f"share data does not describe a benchmark: {exc}") from exc


def share_link(payload: BenchmarkPayload) -> str:
    return f"#{VIEW_PREFIX}{encode_payload(payload)}"


def is_view_hash(location_hash: str) -> bool:
    return _strip_hash(location_hash).startswith("view")


def view_data(location_hash: str) -> str:
    """Return the encoded payload part of a ``#view/<data>`` hash."""

    stripped = _strip_hash(location_hash)
    if not stripped.startswith(VIEW_PREFIX):
        raise PayloadDecodeError(f"'{location_hash[:32]}' is not a view link")
    return stripped[len(VIEW_PREFIX):]


def parse_location_hash(location_hash: str, settings: Optional[Settings] = None) -> Fixture:
    """Parse ``#<projectId>,<warmUpTime>,<recordingTime>`` into a fixture.

    Missing or unusable fields fall back to the configured defaults; an empty
    project id falls back to ``default_project_id``.
    """

    settings = settings or get_settings()
    parts = _strip_hash(location_hash).split(",")

    project_id = parts[0].strip() or settings.default_project_id

    warm_up_time = settings.warm_up_time
    if len(parts) > 1 and parts[1].strip():
        parsed = _to_millis(parts[1])
        if parsed is not None:
            warm_up_time = parsed

    recording_time = _to_millis(parts[2]) if len(parts) > 2 else None
    if not recording_time:
        recording_time = settings.max_recorded_time

    LOGGER.debug("Parsed hash into %s/%s/%s", project_id, warm_up_time, recording_time)
    return Fixture(project_id=project_id, warm_up_time=warm_up_time, recording_time=recording_time)


def _strip_hash(location_hash: str) -> str:
    text = location_hash or ""
    return text[1:] if text.startswith("#") else text


def _to_millis(raw: str) -> Optional[int]:
    try:
        value = int(float(raw.strip()))
    except (TypeError, ValueError, OverflowError):
        return None
    if value < 0:
        return None
    return value
