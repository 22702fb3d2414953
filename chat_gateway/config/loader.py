"""Environment-based configuration loading."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import ValidationError

from ..errors.internal import ConfigurationError
from .model import GatewayConfig

ENV_FIELDS = {
    "TWITCH_BOT_NICK": "bot_nick",
    "TWITCH_CHANNEL_NAME": "channel_name",
    "TWITCH_CLIENT_ID": "client_id",
    "TWITCH_CLIENT_SECRET": "client_secret",
    "TWITCH_REFRESH_TOKEN": "refresh_token",
    "WEB_URI": "web_uri",
    "TWITCH_IRC_URL": "irc_url",
    "TWITCH_TOKEN_URL": "token_url",
    "HTTP_TIMEOUT": "http_timeout",
}


def load_config(environ: Mapping[str, str] | None = None) -> GatewayConfig:
    """Build a ``GatewayConfig`` from environment variables.

    Unset variables fall back to the model defaults.

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid.
    """
    env = os.environ if environ is None else environ
    data = {field: env[name] for name, field in ENV_FIELDS.items() if name in env}
    try:
        return GatewayConfig.from_dict(data)
    except ValidationError as e:
        fields = sorted(
            {_env_name(str(err["loc"][0])) for err in e.errors() if err.get("loc")}
        )
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(fields) or 'unknown field'}",
            data={"fields": fields, "errors": e.error_count()},
        ) from e


def _env_name(field: str) -> str:
    for name, mapped in ENV_FIELDS.items():
        if mapped == field:
            return name
    return field
