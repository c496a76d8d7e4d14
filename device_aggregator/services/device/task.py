"""
Device Task

Owns polling and change detection for one device:
- Reads the value source once at initialization (no retry)
- Reports the initial value, then rereads on every tick of its interval
- Reports a ValueChange only when the parsed value differs

Lifecycle: Initializing -> Running -> Terminated. Any read/parse error or
a closed channel terminates the task; the supervisor may also cancel it
at any suspension point, in which case its state is simply discarded.
"""

from dataclasses import dataclass
from datetime import timedelta

from ...common.config import DeviceConfig
from ...common.exceptions import (
    ChannelClosedError,
    DeviceInitError,
    DeviceRuntimeError,
    SourceError,
)
from ...common.logging_setup import get_service_logger, log_device_value
from ...common.scheduler import IntervalTicker
from ...common.timestamp import utc_now_iso
from ..aggregation.channel import EventChannel
from ..aggregation.messages import ValueChange
from .source import FileValueSource

logger = get_service_logger("device.task")


@dataclass
class DeviceTaskState:
    """Mutable state of a running device task"""
    name: str
    source_path: str
    cycle_time_ms: int
    current_value: float

    @property
    def cycle_time_s(self) -> float:
        return self.cycle_time_ms / 1000.0


def parse_cycle_time(raw: str, device_name: str | None = None) -> int:
    """
    Parse a string-encoded millisecond interval.

    Accepts ASCII digits with an optional leading "+"; surrounding
    whitespace is not trimmed.

    Raises:
        DeviceInitError: If the value is not a positive integer or is too
            large to schedule
    """
    text = str(raw)
    digits = text[1:] if text.startswith("+") else text
    if not (digits.isascii() and digits.isdecimal()):
        raise DeviceInitError(f"invalid cycle time {raw!r}", device_name)
    significant = digits.lstrip("0") or "0"
    if len(significant) > 20:
        raise DeviceInitError(f"cycle time too large: {raw!r}", device_name)

    cycle_time_ms = int(significant)
    if cycle_time_ms <= 0:
        raise DeviceInitError(f"cycle time must be positive, got {cycle_time_ms}ms", device_name)

    try:
        timedelta(milliseconds=cycle_time_ms)
    except OverflowError as e:
        raise DeviceInitError(f"cycle time too large: {raw!r}", device_name) from e
    return cycle_time_ms


class DeviceTask:
    """
    Polls one device and reports value changes to the supervisor.

    Create with DeviceTask.initialize(); run with `await task.run()`.
    """

    def __init__(
        self,
        state: DeviceTaskState,
        source: FileValueSource,
        sender: EventChannel,
    ):
        self.state = state
        self._source = source
        self._sender = sender
        self._ticker = IntervalTicker(state.cycle_time_s, name=state.name)

    @classmethod
    def initialize(
        cls,
        name: str,
        config: DeviceConfig,
        sender: EventChannel,
        source: FileValueSource | None = None,
    ) -> "DeviceTask":
        """
        Read the value source once and validate the interval.

        Args:
            name: Device name
            config: Device configuration
            sender: Channel to report values on
            source: Value source override (defaults to the configured file)

        Raises:
            DeviceInitError: If the source is unreadable/unparsable or the
                interval is invalid
        """
        if source is None:
            source = FileValueSource(config.source_path)

        try:
            current_value = source.read()
        except SourceError as e:
            raise DeviceInitError(e.message, name) from e

        cycle_time_ms = parse_cycle_time(config.cycle_time_ms, name)

        state = DeviceTaskState(
            name=name,
            source_path=config.source_path,
            cycle_time_ms=cycle_time_ms,
            current_value=current_value,
        )
        logger.debug(
            f"Initialized device {name}: value={current_value} cycle={cycle_time_ms}ms",
            extra={"device": name},
        )
        return cls(state, source, sender)

    @property
    def name(self) -> str:
        return self.state.name

    async def run(self) -> None:
        """
        Report the initial value, then poll forever.

        Errors end the task here and are logged, never retried.
        Cancellation propagates.
        """
        try:
            # Guarantees the aggregator has an entry before any tick fires
            await self.send_current_value()

            while True:
                await self._ticker.tick()
                await self.poll_once()

        except DeviceRuntimeError as e:
            logger.error(f"Device task stopped: {e}", extra={"device": self.name})
        except ChannelClosedError:
            logger.info(
                f"Device task {self.name} stopped: event channel closed",
                extra={"device": self.name},
            )

    async def send_current_value(self) -> None:
        """Report the current value"""
        await self._sender.send(ValueChange(self.state.name, self.state.current_value))

    async def poll_once(self) -> bool:
        """
        Reread the source and report a change.

        Returns:
            True if the value changed and was reported

        Raises:
            DeviceRuntimeError: If the source cannot be read or parsed
            ChannelClosedError: If the channel is closed
        """
        try:
            new_value = self._source.read()
        except SourceError as e:
            raise DeviceRuntimeError(e.message, self.name) from e

        changed = new_value != self.state.current_value
        if changed:
            self.state.current_value = new_value
            await self.send_current_value()

        log_device_value(logger, self.name, self.state.current_value, utc_now_iso())
        return changed
