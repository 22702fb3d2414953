"""Centralized internal error hierarchy for collaborator calls.

These exceptions give semantic categories to failures at HTTP and
configuration boundaries. Never surface raw aiohttp / JSON errors to the
dispatch layer; wrap them in one of these instead.

Classes:
  InternalError        – Base for all internal errors.
  NetworkError         – Transient network/IO issues.
  OAuthError           – Authentication / authorization failures.
  ParsingError         – Response parsing / schema validation issues.
  ConfigurationError   – Missing or invalid process configuration.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Connection timeouts, resets and other transport failures of HTTP calls."""


class OAuthError(InternalError):
    """Credential, token or permission failures (HTTP 401)."""


class ParsingError(InternalError):
    """Unexpected response bodies, JSON decoding or schema mismatches."""


class ConfigurationError(InternalError):
    """Raised when the process configuration is missing or invalid."""


__all__ = [
    "InternalError",
    "NetworkError",
    "OAuthError",
    "ParsingError",
    "ConfigurationError",
]
