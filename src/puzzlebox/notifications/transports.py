"""In-process Transport backed by one asyncio.Queue per connected subscriber.

Suitable for hosts that drain events per session (e.g. an SSE handler awaiting
queue.get()) and for tests.

Usage:
    transport = QueueTransport()
    queue = transport.connect("sess-1")
    ...
    event = await queue.get()
    transport.disconnect("sess-1")
"""

from __future__ import annotations

import asyncio

from puzzlebox.notifications.models import ChangeEvent


class QueueTransport:
    """Transport delivering into per-token queues; unknown tokens are unreachable.

    Args:
        maxsize: Per-subscriber queue bound (0 = unbounded). A full queue
            counts as a failed delivery.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._maxsize = maxsize
        self._queues: dict[str, asyncio.Queue[ChangeEvent]] = {}

    def connect(self, token: str) -> asyncio.Queue[ChangeEvent]:
        """Register token and return its queue (existing queue if already connected)."""
        queue = self._queues.get(token)
        if queue is None:
            queue = self._queues[token] = asyncio.Queue(maxsize=self._maxsize)
        return queue

    def disconnect(self, token: str) -> bool:
        return self._queues.pop(token, None) is not None

    def is_connected(self, token: str) -> bool:
        return token in self._queues

    def drain(self, token: str) -> list[ChangeEvent]:
        """Remove and return every queued event for token, oldest first."""
        queue = self._queues.get(token)
        events: list[ChangeEvent] = []
        while queue is not None and not queue.empty():
            events.append(queue.get_nowait())
        return events

    async def send(self, token: str, event: ChangeEvent) -> bool:
        queue = self._queues.get(token)
        if queue is None:
            return False
        try:
            queue.put_nowait(event)
        except asyncio.QueueFull:
            return False
        return True
