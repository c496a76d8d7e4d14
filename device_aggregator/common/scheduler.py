"""
Fixed-Rate Interval Ticker

Provides IntervalTicker, which suspends the caller until the next tick of
a fixed interval, accounting for the time spent between ticks so the
cadence does not drift.

Unlike a bare `await asyncio.sleep(interval)` loop, the ticker:
- Schedules ticks relative to the original schedule, not to when work finished
- Skips missed intervals to catch up (no burst of queued ticks)
- Reports drift metrics for observability

Usage:
    ticker = IntervalTicker(1.0, name="boiler")
    while True:
        await ticker.tick()
        # Do work...

Cancellation of the waiting task interrupts tick() immediately.
"""

import asyncio

from .logging_setup import get_service_logger

logger = get_service_logger("scheduler")


class IntervalTicker:
    """
    Suspend until the next boundary of a fixed interval.

    The first tick fires one full interval after the first call to tick().
    Uses the event loop's monotonic clock, so wall-clock jumps do not
    affect the cadence.

    Attributes:
        interval: Seconds between ticks
        name: Name for logging/identification
    """

    def __init__(self, interval_seconds: float, name: str = "unnamed"):
        if interval_seconds <= 0:
            raise ValueError(f"interval must be positive, got {interval_seconds}")

        self.interval = interval_seconds
        self.name = name

        self._next_tick: float | None = None

        # Observability metrics
        self._tick_count: int = 0
        self._skipped_count: int = 0
        self._drift_total: float = 0
        self._last_drift_ms: float = 0

    async def tick(self) -> None:
        """Wait for the next tick"""
        loop = asyncio.get_running_loop()
        now = loop.time()

        if self._next_tick is None:
            self._next_tick = now + self.interval

        # Skip missed intervals to catch up
        skipped = 0
        while self._next_tick <= now - self.interval:
            self._next_tick += self.interval
            skipped += 1
        if skipped:
            self._skipped_count += skipped
            logger.debug(f"Ticker '{self.name}' skipped {skipped} intervals")

        sleep_duration = self._next_tick - now
        if sleep_duration > 0:
            await asyncio.sleep(sleep_duration)

        drift = loop.time() - self._next_tick
        self._drift_total += max(0, drift)
        self._last_drift_ms = drift * 1000

        self._tick_count += 1
        self._next_tick += self.interval

    @property
    def tick_count(self) -> int:
        """Number of completed ticks"""
        return self._tick_count

    @property
    def skipped_count(self) -> int:
        """Number of intervals skipped to catch up"""
        return self._skipped_count

    def get_stats(self) -> dict:
        """Get ticker statistics for observability."""
        return {
            "name": self.name,
            "interval_s": self.interval,
            "tick_count": self._tick_count,
            "drift_total_s": round(self._drift_total, 3),
            "drift_last_ms": round(self._last_drift_ms, 1),
            "skipped_count": self._skipped_count,
        }
