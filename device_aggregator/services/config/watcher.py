"""
Config Watcher

Polls the device set source and notifies the supervisor once per
detected change. Compares whole snapshots; no partial diff is computed.

A source error stops the watcher for the rest of the run (hot-reload is
disabled, the device tasks keep running).
"""

import asyncio

from ...common.config import DeviceSet
from ...common.exceptions import ChannelClosedError, ConfigError
from ...common.logging_setup import get_service_logger
from ..aggregation.channel import EventChannel
from ..aggregation.messages import ConfigChanged
from .source import FileConfigSource

logger = get_service_logger("config.watcher")

DEFAULT_WATCH_INTERVAL_S = 0.5


class ConfigWatcher:
    """
    Detects device set changes and reports them as ConfigChanged.

    The baseline is seeded with the set active when the watcher starts.
    """

    def __init__(
        self,
        source: FileConfigSource,
        initial: DeviceSet,
        sender: EventChannel,
        interval_s: float = DEFAULT_WATCH_INTERVAL_S,
    ):
        self._source = source
        self._sender = sender
        self.interval_s = interval_s
        self.last_known: DeviceSet = dict(initial)
        self.change_count = 0

    async def run(self) -> None:
        """
        Watch until the source fails or the channel closes.

        Neither failure is retried.
        """
        logger.info(
            f"Watching {self._source.path} for device changes (interval={self.interval_s}s)"
        )

        try:
            while True:
                await asyncio.sleep(self.interval_s)
                await self.check_once()

        except ConfigError as e:
            logger.error(
                f"Config watcher stopped, hot-reload disabled: {e}",
                extra={"path": e.path},
            )
        except ChannelClosedError:
            logger.info("Config watcher stopped: event channel closed")

    async def check_once(self) -> bool:
        """
        Read one snapshot and report it if it differs from the baseline.

        Returns:
            True if a ConfigChanged was sent

        Raises:
            ConfigError: If the snapshot is unreadable or malformed
            ChannelClosedError: If the channel is closed
        """
        snapshot = self._source.load()
        if snapshot == self.last_known:
            return False

        logger.info(
            f"Device set changed: {len(self.last_known)} -> {len(snapshot)} devices",
            extra={"device_count": len(snapshot)},
        )
        self.last_known = snapshot
        self.change_count += 1
        await self._sender.send(ConfigChanged(dict(snapshot)))
        return True
