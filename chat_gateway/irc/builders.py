"""Outbound protocol line builders."""

from __future__ import annotations

from collections.abc import Iterable

from ..constants import IRC_CAPABILITIES


def build_pong(parameters: str | None) -> str:
    return f"PONG {parameters or ''}".rstrip()


def build_privmsg(channel: str, text: str) -> str:
    return f"PRIVMSG {channel} :{text}"


def build_reply(channel: str, text: str, parent_message_id: str | None) -> str:
    """Threaded reply to the chat message ``parent_message_id``."""
    return f"@reply-parent-msg-id={parent_message_id or ''} {build_privmsg(channel, text)}"


def build_join(channels: Iterable[str]) -> str | None:
    names = [channel if channel.startswith("#") else f"#{channel}" for channel in channels if channel]
    if not names:
        return None
    return f"JOIN {','.join(names)}"


def build_handshake(
    token: str,
    nick: str,
    static_channel: str | None,
    roster: Iterable[str],
) -> list[str]:
    """CAP, PASS, NICK, then the static channel join and one batched roster join."""
    lines = [
        f"CAP REQ :{IRC_CAPABILITIES}",
        f"PASS oauth:{token}",
        f"NICK {nick}",
    ]
    if static_channel:
        lines.append(f"JOIN #{static_channel}")
    roster_join = build_join(roster)
    if roster_join:
        lines.append(roster_join)
    return lines
