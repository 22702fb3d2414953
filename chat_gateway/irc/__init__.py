"""IRC line decoding.

Tag decoding, command classification, the positional line parser used by
the session reader and the builders for outbound lines.
"""

from .builders import (  # noqa: F401
    build_handshake,
    build_join,
    build_pong,
    build_privmsg,
    build_reply,
)
from .commands import classify_command  # noqa: F401
from .models import (  # noqa: F401
    CapCommand,
    ChannelCommand,
    CommandInfo,
    EmotePosition,
    OutboundItem,
    ParsedMessage,
    SourceInfo,
    TagSet,
    Verb,
)
from .parser import parse_line, parse_source, split_frame  # noqa: F401
from .tags import decode_tags  # noqa: F401

__all__ = [
    "CapCommand",
    "ChannelCommand",
    "CommandInfo",
    "EmotePosition",
    "OutboundItem",
    "ParsedMessage",
    "SourceInfo",
    "TagSet",
    "Verb",
    "build_handshake",
    "build_join",
    "build_pong",
    "build_privmsg",
    "build_reply",
    "classify_command",
    "decode_tags",
    "parse_line",
    "parse_source",
    "split_frame",
]
