"""Gateway error hierarchy for the connection and dispatch layers.

Parse and dispatch failures are contained at the line/command boundary;
only ``TransportError`` (and an explicit RECONNECT notice) ends a
generation, and ``ReconnectLimitExceeded`` ends the run.
"""


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Args:
        message (str): Error message.
        channel (str | None): Channel the failure relates to, if any.
        operation_type (str | None): Operation that failed (e.g. 'connect', 'send').
    """

    def __init__(
        self,
        message: str,
        channel: str | None = None,
        operation_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.channel = channel
        self.operation_type = operation_type


class ParseError(GatewayError):
    """Raised inside the line parser for malformed input.

    Never escapes ``parse_line``; callers only see a ``None`` result.
    """


class DispatchError(GatewayError):
    """A recognised chat command whose collaborator call failed.

    Args:
        message (str): Internal description, logged.
        user_message (str | None): Failure category suitable for a chat reply.
    """

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        channel: str | None = None,
        operation_type: str | None = None,
    ) -> None:
        super().__init__(message, channel=channel, operation_type=operation_type)
        self.user_message = user_message


class TransportError(GatewayError):
    """Socket open, read or write failure. Always ends the current generation."""


class ReconnectLimitExceeded(GatewayError):
    """Raised when consecutive connection attempts hit the configured cap.

    Args:
        attempts (int): Number of consecutive failed attempts.
    """

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Connection failed {attempts} consecutive times",
            operation_type="connect",
        )
        self.attempts = attempts
