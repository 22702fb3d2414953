"""Single ordered conduit between line producers and the socket writer."""

from __future__ import annotations

import asyncio
import logging

from ..constants import OUTBOUND_QUEUE_SIZE
from ..irc.models import OutboundItem
from ..logs.logger import logger


class OutboundRouter:
    """Bounded multi-producer / single-consumer queue of outbound lines.

    Per-producer submission order is preserved. Producers block while the
    queue is full. Once ``terminate`` has been enqueued, later submissions
    are dropped so the sentinel stays the last item the writer sees.
    """

    def __init__(self, maxsize: int = OUTBOUND_QUEUE_SIZE) -> None:
        self._queue: asyncio.Queue[OutboundItem] = asyncio.Queue(maxsize)
        self._terminated = False

    @property
    def terminated(self) -> bool:
        return self._terminated

    def qsize(self) -> int:
        return self._queue.qsize()

    async def send(self, text: str) -> bool:
        """Enqueue a line. Returns False when the router already terminated."""
        if self._terminated:
            logger.log_event(
                "outbound", "dropped_after_terminate", level=logging.DEBUG, text=text
            )
            return False
        await self._queue.put(OutboundItem.send(text))
        return True

    async def terminate(self) -> None:
        """Enqueue the terminate sentinel once."""
        if self._terminated:
            return
        self._terminated = True
        await self._queue.put(OutboundItem.terminate())

    async def get(self) -> OutboundItem:
        return await self._queue.get()

    def discard_pending(self) -> int:
        """Mark terminated and drop whatever the writer never consumed."""
        self._terminated = True
        dropped = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            dropped += 1
        return dropped
