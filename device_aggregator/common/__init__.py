"""
Common Utilities

Shared modules used across all services:
- config.py - Device set and settings dataclasses
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
- scheduler.py - Fixed-rate interval ticker
- timestamp.py - UTC timestamp helpers
"""

from .config import (
    DeviceConfig,
    DeviceSet,
    AppSettings,
    WatcherSettings,
    ReporterSettings,
    StatusSettings,
    LoggingSettings,
    parse_device_set,
    load_app_settings,
    load_settings,
)
from .exceptions import (
    AggregatorError,
    ConfigError,
    SettingsError,
    SourceError,
    DeviceError,
    DeviceInitError,
    DeviceRuntimeError,
    ChannelClosedError,
)
from .logging_setup import (
    setup_logging,
    get_service_logger,
    log_device_value,
    log_summary,
)
from .scheduler import IntervalTicker

__all__ = [
    # Config
    "DeviceConfig",
    "DeviceSet",
    "AppSettings",
    "WatcherSettings",
    "ReporterSettings",
    "StatusSettings",
    "LoggingSettings",
    "parse_device_set",
    "load_app_settings",
    "load_settings",
    # Exceptions
    "AggregatorError",
    "ConfigError",
    "SettingsError",
    "SourceError",
    "DeviceError",
    "DeviceInitError",
    "DeviceRuntimeError",
    "ChannelClosedError",
    # Logging
    "setup_logging",
    "get_service_logger",
    "log_device_value",
    "log_summary",
    # Scheduling
    "IntervalTicker",
]
