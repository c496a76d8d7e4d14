"""
Aggregation Store

Mapping of device name to latest value. Only the supervisor's event loop
writes to it; readers take a snapshot under the lock and release it
before doing any I/O with the result.
"""

import threading


class AggregationStore:
    """Lock-protected map of device name -> latest value"""

    def __init__(self):
        self._values: dict[str, float] = {}
        self._lock = threading.Lock()

    def upsert(self, name: str, value: float) -> None:
        """Insert or replace the value of a device"""
        with self._lock:
            self._values[name] = value

    def clear(self) -> None:
        """Drop every entry"""
        with self._lock:
            self._values.clear()

    def snapshot(self) -> dict[str, float]:
        """Copy of the current values"""
        with self._lock:
            return dict(self._values)

    def total(self) -> float:
        """Sum of the current values"""
        with self._lock:
            return sum(self._values.values())

    def get(self, name: str) -> float | None:
        with self._lock:
            return self._values.get(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._values
