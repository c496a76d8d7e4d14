"""
Device Service - per-device polling

Responsibilities:
- Read device values from their sources
- Poll each device at its configured interval
- Report value changes on the event channel
"""

from .source import FileValueSource
from .task import DeviceTask, DeviceTaskState, parse_cycle_time

__all__ = ["FileValueSource", "DeviceTask", "DeviceTaskState", "parse_cycle_time"]
