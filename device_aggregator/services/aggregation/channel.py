"""
Event Channel

Bounded, ordered message conduit from device tasks and the config watcher
to the supervisor.

- A full channel blocks the sender (backpressure instead of unbounded buffering)
- Messages from one sender arrive in send order (FIFO queue)
- No ordering is guaranteed across different senders
- close() wakes every blocked sender and receiver
"""

import asyncio
from typing import Any, Awaitable

from ...common.exceptions import ChannelClosedError
from .messages import Message

DEFAULT_CAPACITY = 100


class EventChannel:
    """
    Many-producer, single-consumer bounded channel.

    Senders get ChannelClosedError once the channel is closed;
    the receiver gets None.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self._closed = asyncio.Event()
        self.capacity = capacity

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def qsize(self) -> int:
        """Number of buffered messages"""
        return self._queue.qsize()

    async def send(self, message: Message) -> None:
        """
        Send a message, waiting while the channel is full.

        Raises:
            ChannelClosedError: If the channel is (or becomes) closed
        """
        if self.closed:
            raise ChannelClosedError()

        try:
            self._queue.put_nowait(message)
            return
        except asyncio.QueueFull:
            pass

        await self._until_closed(self._queue.put(message))

    async def receive(self) -> Message | None:
        """
        Receive the next message.

        Returns:
            The next message, or None once the channel is closed
        """
        if self.closed:
            return None

        if not self._queue.empty():
            return self._queue.get_nowait()

        try:
            return await self._until_closed(self._queue.get())
        except ChannelClosedError:
            return None

    def close(self) -> None:
        """Close the channel; pending and future operations fail"""
        self._closed.set()

    async def _until_closed(self, operation: Awaitable[Any]) -> Any:
        """Run a queue operation, aborting it if the channel gets closed"""
        op_task = asyncio.ensure_future(operation)
        closed_task = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait(
                {op_task, closed_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            closed_task.cancel()
            if not op_task.done():
                op_task.cancel()

        if op_task.done() and not op_task.cancelled():
            return op_task.result()
        raise ChannelClosedError()
