"""
Reporter

Periodically snapshots the aggregation store and emits the total.
Strictly read-only: the store lock is released before anything is emitted.
"""

from dataclasses import dataclass
from typing import Callable

from ...common.logging_setup import get_service_logger, log_summary
from ...common.scheduler import IntervalTicker
from ...common.timestamp import utc_now_iso
from ..aggregation.store import AggregationStore

logger = get_service_logger("reporter")

DEFAULT_REPORT_INTERVAL_S = 2.0


@dataclass(frozen=True)
class Summary:
    """Aggregated view of the store at one instant"""
    timestamp: str
    total: float
    device_count: int

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "total": self.total,
            "count": self.device_count,
        }


def log_sink(summary: Summary) -> None:
    """Default sink: one summary line through the service logger"""
    log_summary(logger, summary.total, summary.device_count, summary.timestamp)


def summarize(store: AggregationStore) -> Summary:
    """Build a Summary from one store snapshot"""
    values = store.snapshot()
    return Summary(
        timestamp=utc_now_iso(),
        total=sum(values.values()),
        device_count=len(values),
    )


class Reporter:
    """Emits a timestamped summary on a fixed interval"""

    def __init__(
        self,
        store: AggregationStore,
        interval_s: float = DEFAULT_REPORT_INTERVAL_S,
        sink: Callable[[Summary], None] | None = None,
    ):
        self._store = store
        self._sink = sink or log_sink
        self._ticker = IntervalTicker(interval_s, name="reporter")
        self.last_summary: Summary | None = None

    async def run(self) -> None:
        """Report forever (until cancelled)"""
        while True:
            await self._ticker.tick()
            try:
                self.report_once()
            except Exception as e:
                logger.error(f"Summary sink error: {e}", exc_info=True)

    def report_once(self) -> Summary:
        """Compute and emit one summary"""
        summary = summarize(self._store)
        self.last_summary = summary
        self._sink(summary)
        return summary
