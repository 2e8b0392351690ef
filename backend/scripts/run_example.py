"""Utility script to replay a shared benchmark link and print its tables."""

import json
import sys
from pathlib import Path

# Add backend directory to Python path
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from vmbench.services import ProfilerRun, decode_payload
from vmbench.services.share import is_view_hash, view_data


def run(link: str) -> None:
    data = view_data(link) if is_view_hash(link) else link
    payload = decode_payload(data)

    replay = ProfilerRun.for_replay().render(payload)
    report = {
        "fixture": payload.fixture.model_dump(by_alias=True),
        "frames": [row.model_dump() for row in replay.frame_rows],
        "opcodes": [row.model_dump() for row in replay.opcode_rows],
    }
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: run_example.py '#view/<data>'", file=sys.stderr)
        sys.exit(2)
    run(sys.argv[1])
