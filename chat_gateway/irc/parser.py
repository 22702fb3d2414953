"""Positional parser for Twitch IRC lines.

Grammar: ``[@tags ][:source ]COMMAND [args][ :parameters]``. The command
block is everything up to the first ``:`` after the prefixes; the
parameters block is everything after it, stored verbatim.
"""

from __future__ import annotations

import logging

from ..constants import IRC_LINE_DELIMITER
from ..errors.gateway import ParseError
from ..logs.logger import logger
from .commands import classify_command
from .models import ParsedMessage, SourceInfo
from .tags import decode_tags


def split_frame(frame: str) -> list[str]:
    """Split one transport frame into its non-empty protocol lines."""
    return [line for line in frame.rstrip().split(IRC_LINE_DELIMITER) if line]


def parse_line(line: str) -> ParsedMessage | None:
    """Parse one protocol line.

    Returns None for malformed lines, numeric status replies and
    unrecognized verbs. Never raises for bad input.
    """
    try:
        raw_tags, raw_source, raw_command, raw_parameters = _split_components(line)
    except ParseError as e:
        logger.log_event(
            "irc", "unparseable_line", level=logging.DEBUG, raw=line, error=str(e)
        )
        return None

    command = classify_command(raw_command)
    if command is None:
        return None

    return ParsedMessage(
        command=command,
        source=parse_source(raw_source),
        tags=decode_tags(raw_tags) if raw_tags else None,
        parameters=raw_parameters,
    )


def parse_source(raw_source: str) -> SourceInfo:
    """``nick!user@host`` -> nick + host; server names carry no nick."""
    if not raw_source:
        return SourceInfo()
    parts = raw_source.split("!")
    if len(parts) == 2:
        return SourceInfo(nick=parts[0], host=parts[1])
    return SourceInfo(nick=None, host=parts[0])


def _split_components(line: str) -> tuple[str, str, str, str | None]:
    if not line:
        raise ParseError("empty line")

    rest = line
    raw_tags = ""
    if rest.startswith("@"):
        end = rest.find(" ")
        if end == -1:
            raise ParseError("tag block without command")
        raw_tags = rest[1:end]
        rest = rest[end + 1 :]

    raw_source = ""
    if rest.startswith(":"):
        end = rest.find(" ")
        if end == -1:
            raise ParseError("source block without command")
        raw_source = rest[1:end]
        rest = rest[end + 1 :]

    raw_parameters: str | None = None
    end = rest.find(":")
    if end == -1:
        raw_command = rest.strip()
    else:
        raw_command = rest[:end].strip()
        raw_parameters = rest[end + 1 :]

    if not raw_command:
        raise ParseError("missing command")
    return raw_tags, raw_source, raw_command, raw_parameters
