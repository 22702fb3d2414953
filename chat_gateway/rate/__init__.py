"""Connection backoff policy."""

from .backoff_strategy import (  # noqa: F401
    ConnectionAttemptState,
    connection_backoff_delay,
    wait_connection_backoff,
)

__all__ = [
    "ConnectionAttemptState",
    "connection_backoff_delay",
    "wait_connection_backoff",
]
