"""Per-channel skip-vote aggregation with quorum, vote expiry and cooldown."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from ..constants import SKIP_COOLDOWN_SECONDS, SKIP_VOTE_QUORUM, SKIP_VOTE_TTL_SECONDS
from ..errors.gateway import DispatchError
from ..errors.internal import InternalError
from ..logs.logger import logger

SkipAction = Callable[[str], Awaitable[bool]]

SKIP_FAILED_REPLY = "Could not skip the song right now"


class VoteOutcome(str, Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    COOLDOWN = "cooldown"
    SKIPPED = "skipped"
    STALE = "stale"  # quorum reached but the generation ended while skipping


@dataclass(slots=True)
class SkipVoteSession:
    voters: set[str] = field(default_factory=set)
    expiries: dict[str, asyncio.Task[None]] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    cooldown_until: float = 0.0

    def clear(self) -> None:
        self.voters.clear()
        for task in self.expiries.values():
            task.cancel()
        self.expiries.clear()


class VoteSkipAggregator:
    """Collects distinct skip votes per channel.

    Each vote expires ``vote_ttl`` seconds after it was cast unless quorum is
    reached first. Reaching quorum awaits ``skip_action(channel)``; on success
    the channel's votes are cleared and the channel enters a ``cooldown``
    window in which votes are dropped. On failure the votes are kept and a
    ``DispatchError`` is raised.

    Mutations of one channel are serialized by that channel's lock, so the
    dedup / quorum check / clear sequence is atomic with respect to expiry
    timers and other voters.
    """

    def __init__(
        self,
        skip_action: SkipAction,
        quorum: int = SKIP_VOTE_QUORUM,
        vote_ttl: float = SKIP_VOTE_TTL_SECONDS,
        cooldown: float = SKIP_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if quorum < 1:
            raise ValueError("quorum must be at least 1")
        self._skip_action = skip_action
        self.quorum = quorum
        self.vote_ttl = vote_ttl
        self.cooldown = cooldown
        self._clock = clock
        self._sessions: dict[str, SkipVoteSession] = {}
        self.generation = 0

    def _session(self, channel: str) -> SkipVoteSession:
        session = self._sessions.get(channel)
        if session is None:
            session = self._sessions[channel] = SkipVoteSession()
        return session

    def voters(self, channel: str) -> frozenset[str]:
        session = self._sessions.get(channel)
        return frozenset(session.voters) if session else frozenset()

    def voter_count(self, channel: str) -> int:
        session = self._sessions.get(channel)
        return len(session.voters) if session else 0

    def pending_expiries(self, channel: str) -> int:
        session = self._sessions.get(channel)
        return len(session.expiries) if session else 0

    def in_cooldown(self, channel: str) -> bool:
        session = self._sessions.get(channel)
        return bool(session) and self._clock() < session.cooldown_until

    async def register_vote(self, channel: str, user: str) -> VoteOutcome:
        """Record ``user``'s vote for ``channel``; skip when quorum is reached.

        Raises:
            DispatchError: The skip action failed; votes are kept.
        """
        session = self._session(channel)
        generation = self.generation
        async with session.lock:
            if self._clock() < session.cooldown_until:
                logger.log_event(
                    "vote_skip", "cooldown", level=logging.DEBUG, user=user, channel=channel
                )
                return VoteOutcome.COOLDOWN
            if user in session.voters:
                logger.log_event(
                    "vote_skip",
                    "duplicate_vote",
                    level=logging.DEBUG,
                    user=user,
                    channel=channel,
                )
                return VoteOutcome.DUPLICATE

            session.voters.add(user)
            self._schedule_expiry(session, channel, user)
            logger.log_event(
                "vote_skip",
                "vote_recorded",
                user=user,
                channel=channel,
                votes=len(session.voters),
                quorum=self.quorum,
            )
            if len(session.voters) < self.quorum:
                return VoteOutcome.RECORDED

            logger.log_event("vote_skip", "quorum_reached", channel=channel)
            await self._perform_skip(channel)

            if generation != self.generation:
                logger.log_event("vote_skip", "stale_result", channel=channel)
                return VoteOutcome.STALE
            session.clear()
            session.cooldown_until = self._clock() + self.cooldown
            return VoteOutcome.SKIPPED

    async def _perform_skip(self, channel: str) -> None:
        try:
            skipped = await self._skip_action(channel)
        except InternalError as e:
            logger.log_event(
                "vote_skip", "skip_failed", level=logging.WARNING, channel=channel, error=str(e)
            )
            raise DispatchError(
                f"Skip request failed: {e}",
                user_message=SKIP_FAILED_REPLY,
                channel=channel,
                operation_type="skip",
            ) from e
        if not skipped:
            logger.log_event("vote_skip", "skip_failed", level=logging.WARNING, channel=channel)
            raise DispatchError(
                "Skip request rejected by the music service",
                user_message=SKIP_FAILED_REPLY,
                channel=channel,
                operation_type="skip",
            )

    def _schedule_expiry(self, session: SkipVoteSession, channel: str, user: str) -> None:
        previous = session.expiries.pop(user, None)
        if previous is not None:
            previous.cancel()
        session.expiries[user] = asyncio.create_task(
            self._expire(session, channel, user), name=f"skip-vote-expiry:{channel}:{user}"
        )

    async def _expire(self, session: SkipVoteSession, channel: str, user: str) -> None:
        await asyncio.sleep(self.vote_ttl)
        async with session.lock:
            if session.expiries.get(user) is not asyncio.current_task():
                return
            del session.expiries[user]
            session.voters.discard(user)
        logger.log_event(
            "vote_skip", "vote_expired", level=logging.DEBUG, user=user, channel=channel
        )

    def end_generation(self) -> None:
        """Drop all pending votes and their timers.

        Skip results still in flight from the ended generation are discarded
        when they complete.
        """
        self.generation += 1
        for session in self._sessions.values():
            session.clear()
