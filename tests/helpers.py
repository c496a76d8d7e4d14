from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path
from typing import Callable


def write_value(path: Path, value: str) -> Path:
    # Replace atomically so a polling task never reads a half-written file
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(value, encoding="utf-8")
    tmp.replace(path)
    return path


def write_devices(path: Path, devices: dict[str, tuple[str | Path, str]]) -> Path:
    """Write an asset list mapping name -> (file, cycle_time_ms)."""
    data = {
        name: {"file": str(file), "cycle_time_ms": cycle}
        for name, (file, cycle) in devices.items()
    }
    # Replace atomically so the watcher never sees a half-written file
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data), encoding="utf-8")
    tmp.replace(path)
    return path


async def wait_until(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)
