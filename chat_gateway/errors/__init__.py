"""Error hierarchy and error-handling helpers."""

from .gateway import (  # noqa: F401
    DispatchError,
    GatewayError,
    ParseError,
    ReconnectLimitExceeded,
    TransportError,
)
from .internal import (  # noqa: F401
    ConfigurationError,
    InternalError,
    NetworkError,
    OAuthError,
    ParsingError,
)

__all__ = [
    "ConfigurationError",
    "DispatchError",
    "GatewayError",
    "InternalError",
    "NetworkError",
    "OAuthError",
    "ParseError",
    "ParsingError",
    "ReconnectLimitExceeded",
    "TransportError",
]
