"""Chat command table for PRIVMSG bodies (``?song``, ``?skip``...)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors.gateway import DispatchError
from ..errors.handling import log_error
from ..errors.internal import InternalError
from ..irc.builders import build_privmsg, build_reply
from ..irc.models import ParsedMessage
from ..logs.logger import logger
from .vote_skip import VoteOutcome, VoteSkipAggregator

if TYPE_CHECKING:  # pragma: no cover
    from ..api.music import MusicServiceClient, NowPlaying

NO_SONG_REPLY = "No song currently playing"
SONG_FAILED_REPLY = "Could not get the current song"
SKIP_SETTINGS_FAILED_REPLY = "Could not update vote skip settings"
SKIP_PASSED_MESSAGE = "Vote skip passed"
COMMANDS_HELP = "?song ?songlink ?slink ?skip ?skipon ?skipoff"


@dataclass(frozen=True, slots=True)
class ChatContext:
    channel: str
    author: str
    display_name: str | None
    message_id: str | None
    arguments: list[str]

    @classmethod
    def from_message(cls, message: ParsedMessage, arguments: list[str]) -> ChatContext:
        display_name = message.tags.display_name if message.tags else None
        return cls(
            channel=message.channel or "",
            author=display_name or message.source.nick or "",
            display_name=display_name,
            message_id=message.tags.message_id if message.tags else None,
            arguments=arguments,
        )

    @property
    def is_channel_owner(self) -> bool:
        # Display name vs channel login; an approximation of broadcaster identity.
        if not self.display_name:
            return False
        return self.display_name.lower() == self.channel.lstrip("#").lower()

    def reply(self, text: str) -> str:
        return build_reply(self.channel, text, self.message_id)


CommandFn = Callable[[ChatContext], Awaitable[str | None]]


class ChatCommandHandler:
    """Maps the first token of a chat message to a command.

    ``handle`` returns the outbound line to send, if any. Collaborator
    failures become a short reply naming the failure category; unknown
    tokens produce nothing.
    """

    def __init__(self, music: MusicServiceClient, votes: VoteSkipAggregator) -> None:
        self._music = music
        self._votes = votes
        self._commands: dict[str, CommandFn] = {
            "?song": self._song,
            "?slink": self._song_link,
            "?songlink": self._song_link,
            "?skip": self._skip,
            "?skipon": self._skip_on,
            "?skipoff": self._skip_off,
            "?commands": self._help,
        }

    @property
    def command_names(self) -> list[str]:
        return list(self._commands)

    async def handle(self, message: ParsedMessage) -> str | None:
        tokens = (message.parameters or "").split()
        if not tokens or not message.channel:
            return None
        command = self._commands.get(tokens[0])
        if command is None:
            return None

        ctx = ChatContext.from_message(message, tokens[1:])
        try:
            return await command(ctx)
        except DispatchError as e:
            log_error(
                f"Command {tokens[0]} failed",
                e,
                context={"channel": ctx.channel, "author": ctx.author},
                level=logging.WARNING,
            )
            if e.user_message:
                return ctx.reply(e.user_message)
            return None

    async def _now_playing(self, ctx: ChatContext) -> NowPlaying:
        try:
            return await self._music.now_playing(ctx.channel)
        except InternalError as e:
            raise DispatchError(
                f"Could not get song: {e}",
                user_message=SONG_FAILED_REPLY,
                channel=ctx.channel,
                operation_type="song",
            ) from e

    async def _song(self, ctx: ChatContext) -> str:
        track = (await self._now_playing(ctx)).track
        return ctx.reply(track.display if track else NO_SONG_REPLY)

    async def _song_link(self, ctx: ChatContext) -> str:
        track = (await self._now_playing(ctx)).track
        if track is None or not track.external_urls.spotify:
            return ctx.reply(NO_SONG_REPLY)
        return ctx.reply(track.external_urls.spotify)

    async def _skip(self, ctx: ChatContext) -> str | None:
        if not ctx.author or self._votes.in_cooldown(ctx.channel):
            return None
        outcome = await self._votes.register_vote(ctx.channel, ctx.author)
        if outcome is VoteOutcome.SKIPPED:
            return build_privmsg(ctx.channel, SKIP_PASSED_MESSAGE)
        return None

    async def _skip_on(self, ctx: ChatContext) -> str | None:
        return await self._toggle_skip(ctx, enable=True)

    async def _skip_off(self, ctx: ChatContext) -> str | None:
        return await self._toggle_skip(ctx, enable=False)

    async def _toggle_skip(self, ctx: ChatContext, *, enable: bool) -> str | None:
        if not ctx.is_channel_owner:
            logger.log_event(
                "command", "not_owner", level=logging.INFO, channel=ctx.channel, author=ctx.author
            )
            return None
        action = self._music.enable_skip if enable else self._music.disable_skip
        try:
            updated = await action(ctx.channel)
        except InternalError as e:
            raise DispatchError(
                f"Updating vote skip failed: {e}",
                user_message=SKIP_SETTINGS_FAILED_REPLY,
                channel=ctx.channel,
                operation_type="skip_toggle",
            ) from e
        if not updated:
            raise DispatchError(
                "Updating vote skip rejected by the web service",
                user_message=SKIP_SETTINGS_FAILED_REPLY,
                channel=ctx.channel,
                operation_type="skip_toggle",
            )
        return ctx.reply("Vote skip is now enabled" if enable else "Vote skip is now disabled")

    async def _help(self, ctx: ChatContext) -> str:
        return ctx.reply(COMMANDS_HELP)
