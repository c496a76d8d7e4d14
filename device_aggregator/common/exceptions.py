"""
Custom Exception Classes for the Device Aggregator

Hierarchical exception structure for error handling across services.
Errors are caught at task boundaries and logged; none of them are retried.
"""


class AggregatorError(Exception):
    """Base exception for all device aggregator errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(AggregatorError):
    """Device set source missing, unreadable or malformed"""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"Config Error: {message}")


class SettingsError(AggregatorError):
    """Application settings file invalid"""

    def __init__(self, message: str):
        super().__init__(f"Settings Error: {message}")


class SourceError(AggregatorError):
    """Value source could not be read or parsed"""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class DeviceError(AggregatorError):
    """Errors scoped to a single device"""

    def __init__(self, message: str, device_name: str | None = None):
        self.device_name = device_name
        prefix = f"Device [{device_name}]" if device_name else "Device"
        super().__init__(f"{prefix}: {message}")


class DeviceInitError(DeviceError):
    """Device could not be initialized (source or interval invalid)"""


class DeviceRuntimeError(DeviceError):
    """Read or parse failure while polling a running device"""


class ChannelClosedError(AggregatorError):
    """Receiving side of the event channel is gone"""

    def __init__(self, message: str = "event channel closed"):
        super().__init__(message)
