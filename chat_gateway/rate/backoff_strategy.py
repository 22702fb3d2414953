"""Reconnect backoff: 0s before the first attempt, then 1, 2, 4, 8... seconds."""

from __future__ import annotations

from dataclasses import dataclass

from tenacity import RetryCallState
from tenacity.wait import wait_base


def connection_backoff_delay(attempt: int) -> float:
    """Delay in seconds applied before the 1-based connection ``attempt``."""
    if attempt <= 1:
        return 0.0
    return float(2 ** (attempt - 2))


class wait_connection_backoff(wait_base):  # noqa: N801 (tenacity naming)
    """Tenacity wait strategy yielding ``connection_backoff_delay`` for the next attempt."""

    def __call__(self, retry_state: RetryCallState) -> float:
        return connection_backoff_delay(retry_state.attempt_number + 1)


@dataclass(slots=True)
class ConnectionAttemptState:
    """Consecutive failed attempts and the delay that preceded the latest one.

    Reset on every successful connection.
    """

    attempts: int = 0
    delay: float = 0.0

    def begin_attempt(self, attempt: int) -> None:
        self.attempts = attempt
        self.delay = connection_backoff_delay(attempt)

    def reset(self) -> None:
        self.attempts = 0
        self.delay = 0.0

    def snapshot(self) -> dict[str, float | int]:
        return {"attempts": self.attempts, "delay": self.delay}
