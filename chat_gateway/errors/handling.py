from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import aiohttp

from ..logging_config import log_structured_error
from .gateway import DispatchError, TransportError
from .internal import (
    ConfigurationError,
    InternalError,
    NetworkError,
    OAuthError,
    ParsingError,
)

T = TypeVar("T")


def _error_type(error: BaseException) -> str:
    if isinstance(error, TransportError):
        return "transport"
    if isinstance(error, DispatchError):
        return "dispatch"
    if isinstance(error, NetworkError | OSError | ConnectionError):
        return "network"
    if isinstance(error, OAuthError):
        return "auth"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, ConfigurationError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error message with the associated exception details.

    The error category is derived from the exception type so that the
    aggregated summary groups network, auth, parsing and transport failures.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level (default: ERROR).
    """
    log_structured_error(
        error_type=_error_type(error),
        message=f"{message}: {error}",
        exception=error,
        context=context,
        level=level,
    )


async def handle_api_error(operation: Callable[[], Awaitable[T]], context: str) -> T:
    """Await an HTTP collaborator call and categorize its failures.

    Args:
        operation: The async operation to execute.
        context: Descriptive context for the operation (e.g. "music status").

    Returns:
        The result of the operation if successful.

    Raises:
        NetworkError: Connection problems, timeouts and 5xx responses.
        OAuthError: HTTP 401.
        ParsingError: Other 4xx responses and undecodable bodies.
    """
    try:
        return await operation()
    except InternalError:
        raise
    except aiohttp.ContentTypeError as e:
        raise ParsingError(
            f"Unexpected response body in {context}: {e.message}",
            data={"operation": context},
        ) from e
    except aiohttp.ClientResponseError as e:
        error_context = {"operation": context, "http_status": e.status, "timestamp": time.time()}
        if e.status == 401:
            raise OAuthError(
                f"Authentication failed in {context}. Check the client credentials and refresh token.",
                data=error_context,
            ) from e
        if 400 <= e.status < 500:
            raise ParsingError(
                f"Client error in {context} (HTTP {e.status})", data=error_context
            ) from e
        raise NetworkError(
            f"Server error in {context} (HTTP {e.status})", data=error_context
        ) from e
    except (aiohttp.ClientError, TimeoutError, OSError) as e:
        raise NetworkError(
            f"Network connectivity issue in {context}: {e}",
            data={"operation": context},
        ) from e
    except (ValueError, KeyError, TypeError) as e:
        raise ParsingError(
            f"Malformed response in {context}: {e}", data={"operation": context}
        ) from e
