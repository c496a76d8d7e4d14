"""
Config Service - device set source and hot-reload

Responsibilities:
- Read complete device set snapshots (JSON or YAML)
- Detect changes and notify the supervisor
"""

from .source import FileConfigSource
from .watcher import ConfigWatcher

__all__ = ["FileConfigSource", "ConfigWatcher"]
