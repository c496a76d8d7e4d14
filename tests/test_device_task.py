from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from device_aggregator.common.config import DeviceConfig
from device_aggregator.common.exceptions import DeviceInitError, DeviceRuntimeError, SourceError
from device_aggregator.services.aggregation.channel import EventChannel
from device_aggregator.services.aggregation.messages import ValueChange
from device_aggregator.services.device.source import FileValueSource
from device_aggregator.services.device.task import DeviceTask, parse_cycle_time

from .helpers import write_value


def test_file_value_source_trims_and_parses(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "  42.5\n")

    assert FileValueSource(path).read() == 42.5


def test_file_value_source_errors(tmp_path: Path) -> None:
    with pytest.raises(SourceError):
        FileValueSource(tmp_path / "missing.txt").read()

    path = write_value(tmp_path / "bad.txt", "twelve")
    with pytest.raises(SourceError) as exc_info:
        FileValueSource(path).read()
    assert exc_info.value.path == str(path)


def test_file_value_source_rejects_digit_separators(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1_000")

    with pytest.raises(SourceError):
        FileValueSource(path).read()


@pytest.mark.parametrize("raw,expected", [("1000", 1000), ("+100", 100), ("007", 7), ("1", 1)])
def test_parse_cycle_time(raw: str, expected: int) -> None:
    assert parse_cycle_time(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["0", "-5", "1.5", "abc", "", "+", " 25 ", "\u00b2", "\u0661\u0662", "9" * 400, "99999999999999999999"],
)
def test_parse_cycle_time_rejects_invalid(raw: str) -> None:
    with pytest.raises(DeviceInitError):
        parse_cycle_time(raw, "dev")


def test_initialize_reads_value_once(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")

    task = DeviceTask.initialize("A", DeviceConfig(str(path), "1000"), EventChannel())

    assert task.state.name == "A"
    assert task.state.current_value == 1.0
    assert task.state.cycle_time_ms == 1000
    assert task.state.cycle_time_s == 1.0


@pytest.mark.parametrize("content", [None, "not-a-number", ""])
def test_initialize_fails_on_bad_source(tmp_path: Path, content) -> None:
    path = tmp_path / "a.txt"
    if content is not None:
        write_value(path, content)

    with pytest.raises(DeviceInitError) as exc_info:
        DeviceTask.initialize("A", DeviceConfig(str(path), "1000"), EventChannel())

    assert exc_info.value.device_name == "A"


def test_initialize_fails_on_invalid_interval(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")

    for raw in ("0", "\u00b2", "9" * 400):
        with pytest.raises(DeviceInitError) as exc_info:
            DeviceTask.initialize("A", DeviceConfig(str(path), raw), EventChannel())
        assert exc_info.value.device_name == "A"


@pytest.mark.asyncio
async def test_run_sends_initial_value_then_changes(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")
    channel = EventChannel()
    task = DeviceTask.initialize("A", DeviceConfig(str(path), "20"), channel)

    runner = asyncio.create_task(task.run())
    try:
        first = await asyncio.wait_for(channel.receive(), timeout=1.0)
        assert first == ValueChange("A", 1.0)

        write_value(path, "2.5")
        second = await asyncio.wait_for(channel.receive(), timeout=1.0)
        assert second == ValueChange("A", 2.5)
        assert task.state.current_value == 2.5
    finally:
        runner.cancel()
        with pytest.raises(asyncio.CancelledError):
            await runner


@pytest.mark.asyncio
async def test_poll_once_reports_only_changes(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")
    channel = EventChannel()
    task = DeviceTask.initialize("A", DeviceConfig(str(path), "1000"), channel)

    assert await task.poll_once() is False
    assert channel.qsize() == 0

    write_value(path, "3")
    assert await task.poll_once() is True
    assert await channel.receive() == ValueChange("A", 3.0)


@pytest.mark.asyncio
async def test_poll_once_raises_runtime_error(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")
    task = DeviceTask.initialize("A", DeviceConfig(str(path), "1000"), EventChannel())

    write_value(path, "garbage")

    with pytest.raises(DeviceRuntimeError):
        await task.poll_once()


@pytest.mark.asyncio
async def test_run_terminates_on_read_error(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")
    channel = EventChannel()
    task = DeviceTask.initialize("A", DeviceConfig(str(path), "20"), channel)

    path.unlink()

    # Returns normally: the error is handled at the task boundary
    await asyncio.wait_for(task.run(), timeout=1.0)

    assert await channel.receive() == ValueChange("A", 1.0)
    assert channel.qsize() == 0


@pytest.mark.asyncio
async def test_run_terminates_when_channel_closed(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")
    channel = EventChannel()
    task = DeviceTask.initialize("A", DeviceConfig(str(path), "20"), channel)
    channel.close()

    await asyncio.wait_for(task.run(), timeout=1.0)


@pytest.mark.asyncio
async def test_run_blocks_on_full_channel(tmp_path: Path) -> None:
    path = write_value(tmp_path / "a.txt", "1.0")
    channel = EventChannel(capacity=1)
    await channel.send(ValueChange("other", 0.0))
    task = DeviceTask.initialize("A", DeviceConfig(str(path), "20"), channel)

    runner = asyncio.create_task(task.run())
    await asyncio.sleep(0.05)
    assert channel.qsize() == 1

    assert await channel.receive() == ValueChange("other", 0.0)
    assert await asyncio.wait_for(channel.receive(), timeout=1.0) == ValueChange("A", 1.0)

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner
