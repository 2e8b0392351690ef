"""Round-trip a stored benchmark payload through a running viewer API."""

import asyncio
import json
import sys
from pathlib import Path

import aiohttp

API_URL = "http://localhost:8001"


async def replay(session: aiohttp.ClientSession, payload: dict) -> dict:
    """Ask the API for a share link, then fetch the rendered view for it."""

    async with session.post(f"{API_URL}/share", json=payload) as response:
        response.raise_for_status()
        link = (await response.json())["link"]

    data = link.split("view/", 1)[1]
    async with session.get(f"{API_URL}/view/{data}") as response:
        if response.status != 200:
            return {"status": "error", "error": await response.text()}
        return {"status": "success", "link": link, "view": await response.json()}


async def main(payload_path: Path) -> None:
    payload = json.loads(payload_path.read_text())

    async with aiohttp.ClientSession() as session:
        result = await replay(session, payload)

    if result["status"] != "success":
        print(f"Replay failed: {result['error']}")
        return

    view = result["view"]
    print(f"Share link: {result['link'][:60]}...")
    for section in ("frames", "opcodes"):
        print(f"\n{section}:")
        for row in view[section]:
            marker = "*" if row["slow"] else " "
            print(f"  {marker} {row['name']:<40} {row['self_time']:>8} {row['total_time']:>8} {row['executions']:>8}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: replay_remote.py payload.json", file=sys.stderr)
        sys.exit(2)
    asyncio.run(main(Path(sys.argv[1])))
