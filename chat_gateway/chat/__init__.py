"""Chat session layer: command dispatch, vote skipping, outbound routing and the session loop."""

from .commands import ChatCommandHandler, ChatContext  # noqa: F401
from .outbound import OutboundRouter  # noqa: F401
from .session import Generation, SessionOrchestrator, SessionState  # noqa: F401
from .vote_skip import VoteOutcome, VoteSkipAggregator  # noqa: F401
from .websocket_connector import WebSocketConnector  # noqa: F401

__all__ = [
    "ChatCommandHandler",
    "ChatContext",
    "Generation",
    "OutboundRouter",
    "SessionOrchestrator",
    "SessionState",
    "VoteOutcome",
    "VoteSkipAggregator",
    "WebSocketConnector",
]
