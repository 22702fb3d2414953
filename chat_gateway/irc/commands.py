"""Classification of the raw command block into a typed command."""

from __future__ import annotations

import logging

from ..logs.logger import logger
from .models import CapCommand, ChannelCommand, CommandInfo, Verb

CHANNEL_VERBS = frozenset(
    {
        Verb.JOIN,
        Verb.PART,
        Verb.NOTICE,
        Verb.CLEARCHAT,
        Verb.HOSTTARGET,
        Verb.PRIVMSG,
        Verb.USERSTATE,
        Verb.ROOMSTATE,
        Verb.WELCOME,
    }
)

# Status replies the gateway has no use for
IGNORED_NUMERICS = frozenset({"002", "003", "004", "353", "366", "372", "375", "376"})
UNSUPPORTED_COMMAND = "421"


def classify_command(raw_command: str) -> CommandInfo | None:
    """Map the command block (``"PRIVMSG #chan"``, ``"CAP * ACK"``...) to a command.

    Returns None for numeric status replies, ``421`` and unknown verbs; the
    caller drops those lines.
    """
    parts = raw_command.split()
    if not parts:
        return None
    token = parts[0]

    if token in IGNORED_NUMERICS:
        logger.log_event("irc", "numeric_reply", level=logging.DEBUG, code=token)
        return None
    if token == UNSUPPORTED_COMMAND:
        logger.log_event(
            "irc",
            "unsupported_command",
            command=_nth(parts, 2) or "?",
        )
        return None

    try:
        verb = Verb(token)
    except ValueError:
        logger.log_event("irc", "unexpected_command", level=logging.DEBUG, command=token)
        return None

    if verb in CHANNEL_VERBS:
        return ChannelCommand(verb=verb, channel=_nth(parts, 1))
    if verb is Verb.CAP:
        flag = _nth(parts, 2)
        return CapCommand(verb=verb, acknowledged=None if flag is None else flag == "ACK")
    if verb is Verb.RECONNECT:
        logger.log_event("irc", "reconnect_notice")
    return CommandInfo(verb=verb)


def _nth(parts: list[str], index: int) -> str | None:
    return parts[index] if len(parts) > index else None
