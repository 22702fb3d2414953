"""Structured representation of decoded IRC lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Verb(str, Enum):
    PING = "PING"
    JOIN = "JOIN"
    PART = "PART"
    NOTICE = "NOTICE"
    CLEARCHAT = "CLEARCHAT"
    HOSTTARGET = "HOSTTARGET"
    PRIVMSG = "PRIVMSG"
    CAP = "CAP"
    GLOBALUSERSTATE = "GLOBALUSERSTATE"
    USERSTATE = "USERSTATE"
    ROOMSTATE = "ROOMSTATE"
    RECONNECT = "RECONNECT"
    WELCOME = "001"


@dataclass(frozen=True, slots=True)
class CommandInfo:
    """A classified command verb without further payload (PING, RECONNECT, ...)."""

    verb: Verb


@dataclass(frozen=True, slots=True)
class ChannelCommand(CommandInfo):
    """Channel-scoped verbs. ``channel`` keeps its leading ``#``."""

    channel: str | None = None


@dataclass(frozen=True, slots=True)
class CapCommand(CommandInfo):
    """Capability negotiation reply; ``acknowledged`` is None when the reply is truncated."""

    acknowledged: bool | None = None


@dataclass(frozen=True, slots=True)
class EmotePosition:
    start: str | None
    end: str | None


@dataclass(slots=True)
class TagSet:
    """Decoded tag block.

    Each tag name lands in exactly one of the mappings; ignored tags
    (``client-nonce``, ``flags``) land in none. A mapping stays ``None`` until
    a tag for it is seen.
    """

    badges: dict[str, str] | None = None
    emotes: dict[str, list[EmotePosition]] | None = None
    emote_sets: dict[int, str] | None = None
    other: dict[str, str] | None = None

    def get(self, name: str, default: str | None = None) -> str | None:
        if self.other is None:
            return default
        return self.other.get(name, default)

    @property
    def display_name(self) -> str | None:
        return self.get("display-name") or None

    @property
    def message_id(self) -> str | None:
        return self.get("id") or None


@dataclass(frozen=True, slots=True)
class SourceInfo:
    nick: str | None = None
    host: str | None = None


@dataclass(slots=True)
class ParsedMessage:
    command: CommandInfo
    source: SourceInfo = field(default_factory=SourceInfo)
    tags: TagSet | None = None
    parameters: str | None = None

    @property
    def verb(self) -> Verb:
        return self.command.verb

    @property
    def channel(self) -> str | None:
        if isinstance(self.command, ChannelCommand):
            return self.command.channel
        return None


@dataclass(frozen=True, slots=True)
class OutboundItem:
    """A line for the writer, or the terminate sentinel when ``text`` is None."""

    text: str | None = None

    @property
    def is_terminate(self) -> bool:
        return self.text is None

    @classmethod
    def send(cls, text: str) -> OutboundItem:
        return cls(text)

    @classmethod
    def terminate(cls) -> OutboundItem:
        return cls(None)
