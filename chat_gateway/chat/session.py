"""Session orchestrator: connection lifecycle and per-generation tasks.

One generation is one connected session. Each generation runs three tasks
that only share the socket through its ``OutboundRouter``:

* reader   - decodes inbound frames, dispatches commands, feeds replies
* writer   - drains the router onto the socket until the terminate sentinel
* consumer - forwards work-queue payloads into the router, acking after hand-off

A RECONNECT notice, a socket error or the terminate sentinel ends the
generation; the orchestrator drains it and reconnects with backoff.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    stop_when_event_set,
)

from ..constants import (
    MAX_CONNECTION_ATTEMPTS,
    OUTBOUND_QUEUE_SIZE,
    WRITER_DRAIN_TIMEOUT_SECONDS,
)
from ..errors.gateway import ReconnectLimitExceeded, TransportError
from ..errors.handling import log_error
from ..errors.internal import InternalError
from ..irc.builders import build_handshake, build_pong
from ..irc.models import ParsedMessage, Verb
from ..irc.parser import parse_line, split_frame
from ..logs.logger import logger
from ..rate.backoff_strategy import ConnectionAttemptState, wait_connection_backoff
from .commands import ChatCommandHandler
from .outbound import OutboundRouter
from .vote_skip import VoteSkipAggregator

if TYPE_CHECKING:  # pragma: no cover
    from ..api.identity import TokenClient
    from ..api.music import MusicServiceClient
    from ..config.model import GatewayConfig
    from ..queue.work_queue import WorkQueue
    from .websocket_connector import WebSocketConnector


class SessionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    DRAINING = auto()


@dataclass
class Generation:
    number: int
    router: OutboundRouter
    tasks: dict[str, asyncio.Task[Any]] = field(default_factory=dict)
    reason: str | None = None
    lines_received: int = 0
    lines_sent: int = 0
    lines_dropped: int = 0

    def end(self, reason: str) -> None:
        if self.reason is None:
            self.reason = reason


class SessionOrchestrator:
    """Keeps the chat connection alive and routes traffic through it.

    ``run`` returns after ``stop`` is called, and raises
    ``ReconnectLimitExceeded`` when ``max_attempts`` consecutive connection
    attempts fail.
    """

    def __init__(
        self,
        config: GatewayConfig,
        connector: WebSocketConnector,
        token_client: TokenClient,
        music: MusicServiceClient,
        work_queue: WorkQueue,
        *,
        votes: VoteSkipAggregator | None = None,
        max_attempts: int = MAX_CONNECTION_ATTEMPTS,
        outbound_queue_size: int = OUTBOUND_QUEUE_SIZE,
        drain_timeout: float = WRITER_DRAIN_TIMEOUT_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._connector = connector
        self._token_client = token_client
        self._music = music
        self._work_queue = work_queue
        self.votes = votes or VoteSkipAggregator(music.skip)
        self.commands = ChatCommandHandler(music, self.votes)
        self.max_attempts = max_attempts
        self._outbound_queue_size = outbound_queue_size
        self._drain_timeout = drain_timeout
        self._sleep = sleep
        self.state = SessionState.DISCONNECTED
        self.attempts = ConnectionAttemptState()
        self.generation: Generation | None = None
        self._generation_count = 0
        self._token: str | None = None
        self._stop_event = asyncio.Event()
        self._in_flight: set[asyncio.Task[Any]] = set()

    def _set_state(self, new_state: SessionState) -> None:
        if self.state != new_state:
            logging.debug(f"🔀 Session state {self.state.name} -> {new_state.name}")
            self.state = new_state

    def stop(self) -> None:
        """End the current generation and leave ``run`` without reconnecting."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stats(self) -> dict[str, Any]:
        gen = self.generation
        return {
            "state": self.state.name,
            "generation": self._generation_count,
            **self.attempts.snapshot(),
            "lines_received": gen.lines_received if gen else 0,
            "lines_sent": gen.lines_sent if gen else 0,
            "lines_dropped": gen.lines_dropped if gen else 0,
        }

    async def run(self) -> None:
        try:
            while not self.stopped:
                if not await self._connect_with_backoff():
                    break
                if self.stopped:
                    await self._connector.disconnect()
                    break
                await self._run_generation()
        finally:
            self._set_state(SessionState.DISCONNECTED)
            logger.log_event("session", "stopped")

    # ---- connection lifecycle ----
    async def _connect_with_backoff(self) -> bool:
        self._set_state(SessionState.CONNECTING)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts) | stop_when_event_set(self._stop_event),
            wait=wait_connection_backoff(),
            retry=retry_if_exception_type((TransportError, InternalError)),
            before=self._before_attempt,
            after=self._after_failed_attempt,
            before_sleep=self._before_sleep,
            sleep=self._backoff_sleep,
        )
        try:
            async for attempt in retrying:
                if self.stopped:
                    return False
                with attempt:
                    await self._open_connection()
        except RetryError as e:
            if self.stopped:
                return False
            logger.log_event(
                "session", "attempts_exhausted", level=logging.CRITICAL, attempts=self.attempts.attempts
            )
            raise ReconnectLimitExceeded(self.attempts.attempts) from e.last_attempt.exception()
        self.attempts.reset()
        return True

    async def _backoff_sleep(self, delay: float) -> None:
        """Sleep ``delay`` seconds, waking early when ``stop`` is called."""
        if self.stopped:
            return
        sleeper = asyncio.ensure_future(self._sleep(delay))
        stopper = asyncio.ensure_future(self._stop_event.wait())
        try:
            await asyncio.wait({sleeper, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            sleeper.cancel()
            stopper.cancel()

    async def _open_connection(self) -> None:
        self._token = await self._token_client.fetch_access_token()
        await self._connector.connect()

    def _before_attempt(self, retry_state: RetryCallState) -> None:
        self.attempts.begin_attempt(retry_state.attempt_number)
        logger.log_event("session", "connect_attempt", attempt=retry_state.attempt_number)

    def _after_failed_attempt(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.log_event(
            "session",
            "connect_failed",
            level=logging.ERROR,
            attempt=retry_state.attempt_number,
            error=str(error),
        )

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.log_event("session", "backoff_wait", level=logging.WARNING, delay=delay)

    # ---- generation ----
    async def _run_generation(self) -> None:
        self._generation_count += 1
        gen = Generation(self._generation_count, OutboundRouter(self._outbound_queue_size))
        self.generation = gen
        self._set_state(SessionState.CONNECTED)
        logger.log_event("session", "connected", generation=gen.number)

        gen.tasks["writer"] = asyncio.create_task(self._writer(gen), name=f"writer-{gen.number}")
        stop_waiter = asyncio.create_task(self._stop_event.wait())
        try:
            await self._send_handshake(gen)
            gen.tasks["reader"] = asyncio.create_task(self._reader(gen), name=f"reader-{gen.number}")
            gen.tasks["consumer"] = asyncio.create_task(
                self._consume_queue(gen), name=f"consumer-{gen.number}"
            )
            await asyncio.wait(
                {gen.tasks["reader"], gen.tasks["writer"], stop_waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if stop_waiter.done():
                gen.end("stop requested")
        finally:
            stop_waiter.cancel()
            await self._drain(gen)

    async def _send_handshake(self, gen: Generation) -> None:
        roster = await self._fetch_roster()
        lines = build_handshake(
            self._token or "", self.config.bot_nick, self.config.channel_name, roster
        )
        for line in lines:
            await gen.router.send(line)
        logger.log_event("session", "handshake_sent", level=logging.DEBUG, joins=len(lines) - 3)

    async def _fetch_roster(self) -> list[str]:
        try:
            return await self._music.active_users()
        except InternalError as e:
            logger.log_event("session", "roster_unavailable", level=logging.WARNING)
            log_error("Active roster request failed", e, level=logging.WARNING)
            return []

    async def _drain(self, gen: Generation) -> None:
        self._set_state(SessionState.DRAINING)
        gen.end("transport closed")
        logger.log_event("session", "draining", generation=gen.number, reason=gen.reason)

        consumer = gen.tasks.get("consumer")
        if consumer is not None:
            consumer.cancel()
        reader = gen.tasks.get("reader")
        if reader is not None and not reader.done():
            reader.cancel()

        writer = gen.tasks["writer"]
        if not writer.done():
            try:
                await asyncio.wait_for(self._flush(gen, writer), timeout=self._drain_timeout)
            except TimeoutError:
                logger.log_event(
                    "session", "writer_flush_timeout", level=logging.WARNING, timeout=self._drain_timeout
                )
                writer.cancel()

        results = await asyncio.gather(*gen.tasks.values(), return_exceptions=True)
        for name, result in zip(gen.tasks, results, strict=True):
            if isinstance(result, Exception):
                log_error(
                    f"Generation {gen.number} {name} ended with error",
                    result,
                    level=logging.WARNING if isinstance(result, TransportError) else logging.ERROR,
                )

        gen.router.discard_pending()
        self.votes.end_generation()
        await self._connector.disconnect()
        self._set_state(SessionState.DISCONNECTED)
        logger.log_event("session", "disconnected", generation=gen.number)

    @staticmethod
    async def _flush(gen: Generation, writer: asyncio.Task[Any]) -> None:
        await gen.router.terminate()
        await asyncio.wait({writer})

    # ---- tasks ----
    async def _writer(self, gen: Generation) -> None:
        while True:
            item = await gen.router.get()
            if item.is_terminate:
                gen.end("terminate")
                return
            await self._connector.send_line(item.text)
            gen.lines_sent += 1
            logger.log_event("outbound", "sent", level=logging.DEBUG, text=_mask(item.text))

    async def _reader(self, gen: Generation) -> None:
        while True:
            try:
                frame = await self._connector.receive_frame()
            except TransportError:
                gen.end("read error")
                raise
            for line in split_frame(frame):
                gen.lines_received += 1
                message = parse_line(line)
                if message is None:
                    gen.lines_dropped += 1
                    continue
                if message.verb is Verb.RECONNECT:
                    gen.end("reconnect notice")
                    await gen.router.terminate()
                    return
                await self._dispatch_shielded(gen, message)

    async def _dispatch_shielded(self, gen: Generation, message: ParsedMessage) -> None:
        # A reader cancelled mid-dispatch leaves the collaborator call running;
        # its reply lands in this generation's terminated router and is dropped.
        task = asyncio.create_task(self._dispatch(gen, message))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        await asyncio.shield(task)

    async def _dispatch(self, gen: Generation, message: ParsedMessage) -> None:
        try:
            if message.verb is Verb.PING:
                await gen.router.send(build_pong(message.parameters))
            elif message.verb is Verb.PRIVMSG:
                logger.log_event(
                    "irc",
                    "privmsg",
                    level=logging.DEBUG,
                    channel=message.channel,
                    author=message.source.nick,
                    chat_message=message.parameters,
                )
                reply = await self.commands.handle(message)
                if reply:
                    await gen.router.send(reply)
            elif message.verb is Verb.CAP:
                logger.log_event(
                    "irc",
                    "cap_ack",
                    level=logging.DEBUG,
                    acknowledged=getattr(message.command, "acknowledged", None),
                )
        except Exception as e:  # noqa: BLE001
            log_error(
                f"Dispatch of {message.verb.value} failed",
                e,
                context={"channel": message.channel, "generation": gen.number},
            )

    async def _consume_queue(self, gen: Generation) -> None:
        async for delivery in self._work_queue.deliveries():
            try:
                handed_off = await gen.router.send(delivery.body)
            except asyncio.CancelledError:
                await delivery.nack(requeue=True)
                raise
            if not handed_off:
                logger.log_event("queue", "handoff_failed", level=logging.WARNING)
                await delivery.nack(requeue=True)
                return
            await delivery.ack()
            logger.log_event("queue", "forwarded", level=logging.DEBUG)


def _mask(text: str) -> str:
    if text.startswith("PASS "):
        return "PASS oauth:***"
    return text
