from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GatewayConfig(BaseModel):
    """Process configuration for the chat gateway.

    Attributes:
        bot_nick: Login of the bot account (NICK).
        client_id: Twitch application client ID.
        client_secret: Twitch application client secret.
        refresh_token: OAuth refresh token exchanged for a chat token on each connect.
        web_uri: Base URL of the web service providing roster and music endpoints.
        channel_name: Optional channel joined on every connect, without '#'.
        irc_url: WebSocket endpoint of Twitch chat.
        token_url: OAuth token endpoint.
        http_timeout: Total timeout in seconds for collaborator HTTP calls.
    """

    model_config = ConfigDict(frozen=True)

    bot_nick: str = Field(min_length=1, max_length=25)
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
    web_uri: str = Field(min_length=1)
    channel_name: str | None = None
    irc_url: str = "wss://irc-ws.chat.twitch.tv:443"
    token_url: str = "https://id.twitch.tv/oauth2/token"
    http_timeout: float = Field(default=30.0, gt=0)

    @field_validator("bot_nick", mode="before")
    @classmethod
    def normalize_nick(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("channel_name", mode="before")
    @classmethod
    def normalize_channel(cls, v: Any) -> Any:
        """Strip whitespace and leading '#'; an empty value means no static channel."""
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("channel_name must be a string")
        stripped = v.strip().lstrip("#").lower()
        return stripped or None

    @field_validator("web_uri")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("web_uri must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("irc_url")
    @classmethod
    def validate_irc_url(cls, v: str) -> str:
        if not v.startswith(("ws://", "wss://")):
            raise ValueError("irc_url must be a ws:// or wss:// URL")
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GatewayConfig:
        return cls.model_validate(dict(data))
