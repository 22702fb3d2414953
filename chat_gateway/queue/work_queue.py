"""Work-queue collaborator: a stream of opaque text payloads with ack/nack."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(slots=True)
class Delivery:
    """One dequeued payload and its acknowledgement handle."""

    body: str
    _ack: Callable[[], Awaitable[None]] = field(repr=False)
    _nack: Callable[[bool], Awaitable[None]] = field(repr=False)
    settled: bool = False

    async def ack(self) -> None:
        if self.settled:
            return
        self.settled = True
        await self._ack()

    async def nack(self, requeue: bool = True) -> None:
        if self.settled:
            return
        self.settled = True
        await self._nack(requeue)


@runtime_checkable
class WorkQueue(Protocol):
    """Anything that yields deliveries; a broker adapter only needs this method."""

    def deliveries(self) -> AsyncIterator[Delivery]: ...


class InMemoryWorkQueue:
    """In-process queue with broker-like settlement.

    Unsettled deliveries stay tracked until acked; a nack with ``requeue``
    publishes the payload again so delivery is at-least-once.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[tuple[int, str]] = asyncio.Queue(maxsize)
        self._ids = itertools.count(1)
        self.unacked: dict[int, str] = {}
        self.acked = 0

    async def publish(self, body: str) -> None:
        await self._queue.put((next(self._ids), body))

    def publish_nowait(self, body: str) -> None:
        self._queue.put_nowait((next(self._ids), body))

    def pending(self) -> int:
        return self._queue.qsize()

    async def deliveries(self) -> AsyncIterator[Delivery]:
        while True:
            tag, body = await self._queue.get()
            self.unacked[tag] = body
            yield Delivery(body, self._make_ack(tag), self._make_nack(tag))

    def _make_ack(self, tag: int) -> Callable[[], Awaitable[None]]:
        async def ack() -> None:
            self.unacked.pop(tag, None)
            self.acked += 1

        return ack

    def _make_nack(self, tag: int) -> Callable[[bool], Awaitable[None]]:
        async def nack(requeue: bool) -> None:
            body = self.unacked.pop(tag, None)
            if body is not None and requeue:
                logging.debug("🔁 Requeued undelivered payload")
                await self.publish(body)

        return nack
