from __future__ import annotations

import asyncio

import pytest

from device_aggregator.common.scheduler import IntervalTicker


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        IntervalTicker(0)


@pytest.mark.asyncio
async def test_ticks_wait_one_interval_each() -> None:
    ticker = IntervalTicker(0.03, name="test")
    loop = asyncio.get_running_loop()

    start = loop.time()
    await ticker.tick()
    await ticker.tick()
    elapsed = loop.time() - start

    assert elapsed >= 0.055
    assert ticker.tick_count == 2
    assert ticker.get_stats()["tick_count"] == 2


@pytest.mark.asyncio
async def test_missed_intervals_are_skipped() -> None:
    ticker = IntervalTicker(0.02, name="slow")
    await ticker.tick()

    # Stall for several intervals
    await asyncio.sleep(0.1)
    loop = asyncio.get_running_loop()
    start = loop.time()
    await ticker.tick()
    await ticker.tick()

    assert ticker.skipped_count >= 2
    # The catch-up tick fires at once; the next waits at most one interval
    assert loop.time() - start < 0.1
