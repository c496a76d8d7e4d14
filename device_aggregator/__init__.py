"""
Device Aggregator

Polls a set of named devices, each backed by a value source, and keeps a
running total of their latest values:
- One polling task per device, each at its own interval
- Value updates and config changes flow through one bounded channel
  into a serialized aggregation loop
- The device list is hot-reloaded when its config file changes
"""

__version__ = "1.0.0"

from .supervisor import Supervisor

__all__ = ["Supervisor", "__version__"]
