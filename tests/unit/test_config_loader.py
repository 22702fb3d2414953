from __future__ import annotations

import pytest
from pydantic import ValidationError

from chat_gateway.config import GatewayConfig, load_config
from chat_gateway.errors.internal import ConfigurationError

BASE_ENV = {
    "TWITCH_BOT_NICK": "GatewayBot",
    "TWITCH_CLIENT_ID": "cid",
    "TWITCH_CLIENT_SECRET": "csecret",
    "TWITCH_REFRESH_TOKEN": "rtoken",
    "WEB_URI": "https://web.example.com/",
}


def test_load_config_normalizes_values():
    config = load_config({**BASE_ENV, "TWITCH_CHANNEL_NAME": "#Streamer"})
    assert config.bot_nick == "gatewaybot"
    assert config.channel_name == "streamer"
    assert config.web_uri == "https://web.example.com"
    assert config.irc_url == "wss://irc-ws.chat.twitch.tv:443"
    assert config.token_url == "https://id.twitch.tv/oauth2/token"
    assert config.http_timeout == 30.0


def test_channel_name_is_optional():
    assert load_config(BASE_ENV).channel_name is None
    assert load_config({**BASE_ENV, "TWITCH_CHANNEL_NAME": "  "}).channel_name is None


def test_missing_required_fields_are_listed():
    env = dict(BASE_ENV)
    del env["TWITCH_REFRESH_TOKEN"]
    del env["WEB_URI"]
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env)
    assert "TWITCH_REFRESH_TOKEN" in str(exc_info.value)
    assert "WEB_URI" in str(exc_info.value)
    assert exc_info.value.data["fields"] == ["TWITCH_REFRESH_TOKEN", "WEB_URI"]


def test_invalid_urls_are_rejected():
    with pytest.raises(ConfigurationError, match="WEB_URI"):
        load_config({**BASE_ENV, "WEB_URI": "ftp://nope"})
    with pytest.raises(ConfigurationError, match="TWITCH_IRC_URL"):
        load_config({**BASE_ENV, "TWITCH_IRC_URL": "https://irc"})


def test_http_timeout_must_be_positive():
    assert load_config({**BASE_ENV, "HTTP_TIMEOUT": "5"}).http_timeout == 5.0
    with pytest.raises(ConfigurationError, match="HTTP_TIMEOUT"):
        load_config({**BASE_ENV, "HTTP_TIMEOUT": "0"})


def test_config_is_frozen():
    config = GatewayConfig.from_dict(
        {
            "bot_nick": "bot",
            "client_id": "c",
            "client_secret": "s",
            "refresh_token": "r",
            "web_uri": "http://localhost:8000",
        }
    )
    with pytest.raises(ValidationError):
        config.bot_nick = "other"
