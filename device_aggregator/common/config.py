"""
Configuration Dataclasses

Type-safe configuration structures for the aggregator:
- DeviceConfig / DeviceSet - the monitored devices (hot-reloadable)
- AppSettings - process-level settings loaded once from YAML
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError, SettingsError


@dataclass(frozen=True)
class DeviceConfig:
    """
    Device configuration.

    cycle_time_ms is kept exactly as configured (string-encoded
    milliseconds); it is parsed and validated when the device task
    is initialized.
    """
    source_path: str
    cycle_time_ms: str


# Device name -> configuration. Plain dict equality decides "no change".
DeviceSet = dict[str, DeviceConfig]


def parse_device_set(data: Any, base_dir: Path | None = None) -> DeviceSet:
    """
    Build a DeviceSet from a parsed config document.

    Args:
        data: Parsed JSON/YAML document (must be a mapping)
        base_dir: Directory that relative source paths are resolved against

    Returns:
        DeviceSet keyed by device name

    Raises:
        ConfigError: If the document shape is invalid
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"expected a mapping of devices, got {type(data).__name__}")

    devices: DeviceSet = {}
    for name, entry in data.items():
        if not isinstance(name, str) or not name:
            raise ConfigError(f"invalid device name: {name!r}")
        if not isinstance(entry, dict):
            raise ConfigError(f"device '{name}': expected a mapping, got {type(entry).__name__}")

        # Accept both the asset-list keys and the descriptive aliases
        source_path = entry.get("file", entry.get("source_path"))
        cycle_time = entry.get("cycle_time_ms", entry.get("cycle_time"))

        if not isinstance(source_path, str) or not source_path:
            raise ConfigError(f"device '{name}': missing or invalid 'file'")
        if cycle_time is None:
            raise ConfigError(f"device '{name}': missing 'cycle_time_ms'")
        if isinstance(cycle_time, bool) or not isinstance(cycle_time, (str, int)):
            raise ConfigError(f"device '{name}': 'cycle_time_ms' must be a string or integer")

        path = Path(source_path)
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path

        devices[name] = DeviceConfig(
            source_path=str(path),
            cycle_time_ms=str(cycle_time),
        )

    return devices


# ---------------------------------------------------------------------------
# Application settings
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS_PATHS = [
    Path("device_aggregator.yaml"),
    Path("/etc/device_aggregator/config.yaml"),
]

LOG_FORMATS = ("text", "json")


@dataclass
class WatcherSettings:
    """Config watcher polling"""
    interval_s: float = 0.5


@dataclass
class ReporterSettings:
    """Summary reporting interval"""
    interval_s: float = 2.0


@dataclass
class StatusSettings:
    """HTTP status server (port 0 disables it)"""
    host: str = "127.0.0.1"
    port: int = 0

    @property
    def enabled(self) -> bool:
        return self.port > 0


@dataclass
class LoggingSettings:
    """Log level and output format"""
    level: str = "INFO"
    format: str = "text"  # text, json


@dataclass
class AppSettings:
    """Complete process settings"""
    devices_file: str = "./asset_list.json"
    channel_capacity: int = 100

    watcher: WatcherSettings = field(default_factory=WatcherSettings)
    reporter: ReporterSettings = field(default_factory=ReporterSettings)
    status: StatusSettings = field(default_factory=StatusSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def validate(self) -> None:
        """Raise SettingsError on the first invalid value"""
        if self.channel_capacity <= 0:
            raise SettingsError("channel_capacity must be positive")
        if self.watcher.interval_s <= 0:
            raise SettingsError("watcher.interval_s must be positive")
        if self.reporter.interval_s <= 0:
            raise SettingsError("reporter.interval_s must be positive")
        if not 0 <= self.status.port <= 65535:
            raise SettingsError(f"status.port out of range: {self.status.port}")
        if self.logging.format not in LOG_FORMATS:
            raise SettingsError(f"logging.format must be one of {LOG_FORMATS}")


def load_app_settings(data: dict) -> AppSettings:
    """Load AppSettings from dictionary (e.g., from YAML file)"""
    watcher_data = data.get("watcher") or {}
    reporter_data = data.get("reporter") or {}
    status_data = data.get("status") or {}
    logging_data = data.get("logging") or {}

    try:
        settings = AppSettings(
            devices_file=str(data.get("devices_file", "./asset_list.json")),
            channel_capacity=int(data.get("channel_capacity", 100)),
            watcher=WatcherSettings(
                interval_s=float(watcher_data.get("interval_s", 0.5)),
            ),
            reporter=ReporterSettings(
                interval_s=float(reporter_data.get("interval_s", 2.0)),
            ),
            status=StatusSettings(
                host=str(status_data.get("host", "127.0.0.1")),
                port=int(status_data.get("port", 0)),
            ),
            logging=LoggingSettings(
                level=str(logging_data.get("level", "INFO")),
                format=str(logging_data.get("format", "text")).lower(),
            ),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise SettingsError(f"invalid value: {e}") from e

    return settings


def find_settings_path(explicit: str | None = None) -> Path | None:
    """
    Resolve the settings file location.

    Priority:
    1. Explicit path (CLI argument)
    2. DEVAGG_SETTINGS environment variable
    3. First existing default path
    """
    if explicit:
        return Path(explicit)

    env_path = os.environ.get("DEVAGG_SETTINGS")
    if env_path:
        return Path(env_path)

    for path in DEFAULT_SETTINGS_PATHS:
        if path.exists():
            return path

    return None


def load_settings(path: str | Path | None = None) -> AppSettings:
    """
    Load, override from environment, and validate settings.

    Args:
        path: Settings file; None searches the default locations

    Returns:
        Validated AppSettings (defaults when no file is found)

    Raises:
        SettingsError: If the file is unreadable or a value is invalid
    """
    settings_path = find_settings_path(str(path) if path else None)
    data: dict = {}

    if settings_path is not None:
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise SettingsError(f"cannot load {settings_path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"{settings_path}: top level must be a mapping")

    settings = load_app_settings(data)

    # Environment overrides
    if os.environ.get("DEVAGG_DEVICES_FILE"):
        settings.devices_file = os.environ["DEVAGG_DEVICES_FILE"]
    if os.environ.get("DEVAGG_LOG_LEVEL"):
        settings.logging.level = os.environ["DEVAGG_LOG_LEVEL"]
    if os.environ.get("DEVAGG_LOG_FORMAT"):
        settings.logging.format = os.environ["DEVAGG_LOG_FORMAT"].lower()

    settings.validate()
    return settings
