"""
Device Aggregator Supervisor

Central coordinator that owns every running task:
- Loads the initial device set (failure is fatal to the process)
- Spawns one DeviceTask per device, the ConfigWatcher and the Reporter
- Consumes the event channel as its single reader, so every mutation of
  the task map and the aggregation store is serialized
- On ConfigChanged, cancels all device tasks, clears the store and
  respawns the tasks from the new set (full replace, no incremental diff)
"""

import asyncio
import signal
from typing import Callable

from .common.config import AppSettings, DeviceSet
from .common.exceptions import DeviceInitError
from .common.logging_setup import get_service_logger
from .services.aggregation.channel import EventChannel
from .services.aggregation.messages import ConfigChanged, Message, ValueChange
from .services.aggregation.store import AggregationStore
from .services.config.source import FileConfigSource
from .services.config.watcher import ConfigWatcher
from .services.device.task import DeviceTask
from .services.reporting.reporter import Reporter, Summary
from .services.reporting.status_server import StatusServer

logger = get_service_logger("supervisor")


class Supervisor:
    """
    Owns the device task set, the aggregation store and the receiving
    end of the event channel.

    Runs until stop() is called (or the channel is otherwise closed).
    """

    def __init__(
        self,
        config_source: FileConfigSource,
        settings: AppSettings | None = None,
        summary_sink: Callable[[Summary], None] | None = None,
    ):
        self._config_source = config_source
        self._settings = settings or AppSettings()
        self._summary_sink = summary_sink

        self.store = AggregationStore()
        self._channel = EventChannel(self._settings.channel_capacity)

        # Device name -> running task
        self._tasks: dict[str, asyncio.Task] = {}
        # Cancelled tasks still unwinding; referenced until done
        self._retired: set[asyncio.Task] = set()

        self._watcher: ConfigWatcher | None = None
        self._watcher_task: asyncio.Task | None = None
        self._reporter: Reporter | None = None
        self._reporter_task: asyncio.Task | None = None
        self._status_server: StatusServer | None = None

        self.config_change_count = 0

    @property
    def device_names(self) -> list[str]:
        """Devices whose task is still running"""
        return sorted(name for name, task in self._tasks.items() if not task.done())

    @property
    def reporter(self) -> Reporter | None:
        return self._reporter

    async def run(self) -> None:
        """
        Start all tasks and process events until the channel closes.

        Raises:
            ConfigError: If the initial device set cannot be loaded
        """
        logger.info(f"Starting supervisor (config: {self._config_source.path})")

        devices = self._config_source.load()
        logger.info(
            f"Loaded {len(devices)} devices from config",
            extra={"device_count": len(devices)},
        )

        try:
            self._spawn_device_tasks(devices)

            self._watcher = ConfigWatcher(
                source=self._config_source,
                initial=devices,
                sender=self._channel,
                interval_s=self._settings.watcher.interval_s,
            )
            self._watcher_task = asyncio.create_task(
                self._watcher.run(), name="config-watcher"
            )

            self._reporter = Reporter(
                store=self.store,
                interval_s=self._settings.reporter.interval_s,
                sink=self._summary_sink,
            )
            self._reporter_task = asyncio.create_task(
                self._reporter.run(), name="reporter"
            )

            if self._settings.status.enabled:
                self._status_server = StatusServer(
                    store=self.store,
                    host=self._settings.status.host,
                    port=self._settings.status.port,
                    device_names=lambda: self.device_names,
                )
                await self._status_server.start()

            await self._event_loop()

        finally:
            await self._shutdown()

    def stop(self) -> None:
        """Close the channel; run() returns once everything is cancelled"""
        if not self._channel.closed:
            logger.info("Stopping supervisor")
        self._channel.close()

    def setup_signal_handlers(self) -> None:
        """Setup graceful shutdown signal handlers"""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._handle_shutdown)
            except NotImplementedError:
                signal.signal(sig, lambda s, f: loop.call_soon_threadsafe(self._handle_shutdown))

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal"""
        logger.info("Received shutdown signal")
        self.stop()

    async def _event_loop(self) -> None:
        """Single consumer of the event channel"""
        while True:
            message = await self._channel.receive()
            if message is None:
                logger.info("Event channel closed, leaving event loop")
                return
            self.handle_message(message)

    def handle_message(self, message: Message) -> None:
        """Apply one message to the store / task set"""
        if isinstance(message, ValueChange):
            # Values still queued from cancelled or never-started tasks are dropped
            if message.name not in self._tasks:
                logger.debug(f"Dropping value for inactive device {message.name}")
                return
            self.store.upsert(message.name, message.value)

        elif isinstance(message, ConfigChanged):
            self._replace_devices(message.new_set)

        else:
            logger.warning(f"Ignoring unknown message: {message!r}")

    def _replace_devices(self, new_set: DeviceSet) -> None:
        """Cancel every device task, clear the store, respawn from new_set"""
        logger.info(
            f"Config changed, restarting {len(self._tasks)} device tasks "
            f"with {len(new_set)} devices",
            extra={"device_count": len(new_set)},
        )
        self.config_change_count += 1

        self._cancel_device_tasks()
        self.store.clear()
        self._spawn_device_tasks(new_set)

    def _spawn_device_tasks(self, devices: DeviceSet) -> None:
        """Start one task per device; failed devices are skipped"""
        for name, config in devices.items():
            try:
                device_task = DeviceTask.initialize(name, config, self._channel)
            except DeviceInitError as e:
                logger.warning(
                    f"Skipping device {name}: {e}",
                    extra={"device": name},
                )
                continue

            self._tasks[name] = asyncio.create_task(
                device_task.run(), name=f"device:{name}"
            )
            logger.info(
                f"Started device {name} (cycle={device_task.state.cycle_time_ms}ms)",
                extra={"device": name},
            )

    def _cancel_device_tasks(self) -> None:
        """Abort all device tasks without waiting for them"""
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
                self._retired.add(task)
                task.add_done_callback(self._retired.discard)
        self._tasks.clear()

    async def _shutdown(self) -> None:
        """Cancel and await every child task"""
        self._channel.close()
        self._cancel_device_tasks()

        children = list(self._retired)
        for task in (self._watcher_task, self._reporter_task):
            if task is not None and not task.done():
                task.cancel()
            if task is not None:
                children.append(task)

        if children:
            await asyncio.gather(*children, return_exceptions=True)

        if self._status_server is not None:
            await self._status_server.stop()
            self._status_server = None

        logger.info("Supervisor stopped")
