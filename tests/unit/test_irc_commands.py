from __future__ import annotations

import pytest

from chat_gateway.irc.commands import classify_command
from chat_gateway.irc.models import CapCommand, ChannelCommand, CommandInfo, Verb


@pytest.mark.parametrize(
    "verb", ["JOIN", "PART", "NOTICE", "CLEARCHAT", "HOSTTARGET", "PRIVMSG", "USERSTATE", "ROOMSTATE"]
)
def test_channel_verbs_carry_channel(verb):
    command = classify_command(f"{verb} #chan")
    assert command == ChannelCommand(verb=Verb(verb), channel="#chan")


def test_channel_verb_without_channel():
    assert classify_command("ROOMSTATE") == ChannelCommand(verb=Verb.ROOMSTATE, channel=None)


def test_bare_verbs():
    assert classify_command("PING") == CommandInfo(verb=Verb.PING)
    assert classify_command("GLOBALUSERSTATE") == CommandInfo(verb=Verb.GLOBALUSERSTATE)
    assert classify_command("RECONNECT") == CommandInfo(verb=Verb.RECONNECT)


def test_cap_flags():
    assert classify_command("CAP * ACK") == CapCommand(verb=Verb.CAP, acknowledged=True)
    assert classify_command("CAP * NAK") == CapCommand(verb=Verb.CAP, acknowledged=False)
    assert classify_command("CAP *") == CapCommand(verb=Verb.CAP, acknowledged=None)


def test_ignored_numerics_return_none():
    for code in ("002", "003", "004", "353", "366", "372", "375", "376"):
        assert classify_command(f"{code} bot") is None


def test_unsupported_command_numeric_logs(caplog):
    with caplog.at_level("INFO"):
        assert classify_command("421 bot WHO") is None
    assert "WHO" in caplog.text


def test_unknown_and_empty():
    assert classify_command("WHISPER bot") is None
    assert classify_command("   ") is None
