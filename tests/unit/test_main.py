"""
Tests for the command-line entry point.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from chat_gateway import main as main_module
from chat_gateway.errors.gateway import ReconnectLimitExceeded

VALID_ENV = {
    "TWITCH_BOT_NICK": "bot",
    "TWITCH_CLIENT_ID": "cid",
    "TWITCH_CLIENT_SECRET": "csecret",
    "TWITCH_REFRESH_TOKEN": "rtoken",
    "WEB_URI": "http://localhost:8000",
}


@pytest.fixture(autouse=True)
def _no_side_effects():
    with patch.object(main_module, "load_dotenv"), patch.object(main_module, "LoggerConfigurator"):
        yield


def test_health_check_passes_with_valid_env():
    with patch.dict("os.environ", VALID_ENV, clear=True):
        with pytest.raises(SystemExit) as exc_info:
            main_module.run(["--health-check"])
    assert exc_info.value.code == 0


def test_health_check_fails_without_config():
    with patch.dict("os.environ", {}, clear=True):
        with pytest.raises(SystemExit) as exc_info:
            main_module.run(["--health-check"])
    assert exc_info.value.code == 1


def test_invalid_config_exits_with_error():
    with patch.dict("os.environ", {"TWITCH_BOT_NICK": "bot"}, clear=True):
        with pytest.raises(SystemExit) as exc_info:
            main_module.run([])
    assert exc_info.value.code == 1


def test_reconnect_limit_exits_with_error():
    failing = AsyncMock(side_effect=ReconnectLimitExceeded(12))
    with patch.dict("os.environ", VALID_ENV, clear=True), patch.object(main_module, "main", failing):
        with pytest.raises(SystemExit) as exc_info:
            main_module.run([])
    assert exc_info.value.code == 1
    failing.assert_awaited_once()


def test_keyboard_interrupt_exits_cleanly():
    interrupted = AsyncMock(side_effect=KeyboardInterrupt)
    with patch.dict("os.environ", VALID_ENV, clear=True), patch.object(main_module, "main", interrupted):
        with pytest.raises(SystemExit) as exc_info:
            main_module.run([])
    assert exc_info.value.code == 0
