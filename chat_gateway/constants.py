"""
Configuration constants for the Twitch chat gateway

This module contains the tunables used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import logging
import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, logs a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logging.warning(
                f"Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Same contract as ``_get_env_int`` for floating point values.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            logging.warning(
                f"Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Vote skip
SKIP_VOTE_QUORUM = _get_env_int("SKIP_VOTE_QUORUM", 5)  # Distinct voters needed
SKIP_VOTE_TTL_SECONDS = _get_env_float(
    "SKIP_VOTE_TTL_SECONDS", 30.0
)  # A vote not reinforced by quorum within this window is dropped
SKIP_COOLDOWN_SECONDS = _get_env_float(
    "SKIP_COOLDOWN_SECONDS", 10.0
)  # Votes after a successful skip are ignored for this long

# Connection lifecycle
MAX_CONNECTION_ATTEMPTS = _get_env_int(
    "MAX_CONNECTION_ATTEMPTS", 12
)  # Consecutive failed attempts before giving up
WEBSOCKET_CONNECT_TIMEOUT_SECONDS = _get_env_float(
    "WEBSOCKET_CONNECT_TIMEOUT_SECONDS", 15.0
)
WRITER_DRAIN_TIMEOUT_SECONDS = _get_env_float(
    "WRITER_DRAIN_TIMEOUT_SECONDS", 5.0
)  # Upper bound on flushing queued lines while a generation drains

# Outbound routing
OUTBOUND_QUEUE_SIZE = _get_env_int(
    "OUTBOUND_QUEUE_SIZE", 100
)  # Producers block once this many lines are pending

# Protocol
IRC_LINE_DELIMITER = "\r\n"
IRC_CAPABILITIES = "twitch.tv/tags twitch.tv/commands"
