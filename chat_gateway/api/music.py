"""Client for the web service that owns the roster and the music player."""

from __future__ import annotations

import logging

import aiohttp
from pydantic import BaseModel, Field

from ..errors.handling import handle_api_error


class Artist(BaseModel):
    name: str


class ExternalUrls(BaseModel):
    spotify: str = ""


class Track(BaseModel):
    name: str
    external_urls: ExternalUrls = Field(default_factory=ExternalUrls)
    artists: list[Artist] = Field(default_factory=list)

    @property
    def display(self) -> str:
        if self.artists:
            return f"{self.artists[0].name} - {self.name}"
        return self.name


class NowPlaying(BaseModel):
    is_playing: bool = False
    item: Track | None = None

    @property
    def track(self) -> Track | None:
        return self.item if self.is_playing else None


class ActiveUsers(BaseModel):
    users: list[str] = Field(default_factory=list)


class MusicServiceClient:
    """Thin asynchronous client for the roster and music endpoints.

    All endpoints are keyed by channel login without the leading '#'.
    Transport and decoding failures are raised as ``InternalError``
    subclasses; a non-2xx status on an action endpoint is returned as False.
    """

    def __init__(
        self, session: aiohttp.ClientSession, base_url: str, timeout: float = 30.0
    ) -> None:
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def active_users(self) -> list[str]:
        async def operation() -> list[str]:
            async with self._session.get(
                f"{self.base_url}/api/active", timeout=self._timeout
            ) as resp:
                resp.raise_for_status()
                body = await resp.json()
            return ActiveUsers.model_validate(body).users

        return await handle_api_error(operation, "active roster")

    async def now_playing(self, channel: str) -> NowPlaying:
        async def operation() -> NowPlaying:
            async with self._session.get(
                f"{self.base_url}/api/spotify/song",
                params={"channel_name": _login(channel)},
                timeout=self._timeout,
            ) as resp:
                resp.raise_for_status()
                body = await resp.json()
            return NowPlaying.model_validate(body)

        return await handle_api_error(operation, "music status")

    async def skip(self, channel: str) -> bool:
        return await self._post_action("/api/spotify/skip", channel, "music skip")

    async def enable_skip(self, channel: str) -> bool:
        return await self._post_action("/api/commands/skip/add", channel, "enable skip")

    async def disable_skip(self, channel: str) -> bool:
        return await self._post_action(
            "/api/commands/skip/remove", channel, "disable skip"
        )

    async def _post_action(self, path: str, channel: str, context: str) -> bool:
        async def operation() -> bool:
            async with self._session.post(
                f"{self.base_url}{path}",
                params={"channel_name": _login(channel)},
                timeout=self._timeout,
            ) as resp:
                if 200 <= resp.status < 300:
                    return True
                logging.info(f"ℹ️ {context} rejected with status {resp.status}")
                return False

        return await handle_api_error(operation, context)


def _login(channel: str) -> str:
    return channel.lstrip("#").lower()
