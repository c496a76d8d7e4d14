"""
Aggregation - message plumbing and the shared value store

- messages.py - ValueChange / ConfigChanged
- channel.py - Bounded event channel (backpressure onto producers)
- store.py - Device name -> latest value, lock-protected
"""

from .channel import EventChannel
from .messages import ConfigChanged, Message, ValueChange
from .store import AggregationStore

__all__ = [
    "EventChannel",
    "ConfigChanged",
    "Message",
    "ValueChange",
    "AggregationStore",
]
