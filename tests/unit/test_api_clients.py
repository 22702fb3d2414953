"""
Tests for the identity and music/roster HTTP clients.
"""

from __future__ import annotations

import asyncio
from unittest.mock import Mock

import aiohttp
import pytest

from chat_gateway.api.identity import TokenClient
from chat_gateway.api.music import MusicServiceClient
from chat_gateway.errors.internal import NetworkError, OAuthError, ParsingError


class FakeResp:
    def __init__(self, status: int, payload=None, json_exception: Exception | None = None):
        self.status = status
        self._payload = payload if payload is not None else {}
        self.json_exception = json_exception

    async def __aenter__(self):
        return self

    async def __aexit__(self, _exc_type, _exc, _tb):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=Mock(real_url="http://x"), history=(), status=self.status
            )

    async def json(self):
        await asyncio.sleep(0)
        if self.json_exception:
            raise self.json_exception
        return self._payload


class FakeSession:
    def __init__(self, responses: dict[str, FakeResp], raise_exception: Exception | None = None):
        self.responses = responses
        self.raise_exception = raise_exception
        self.calls: list[tuple[str, str, dict]] = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.raise_exception:
            raise self.raise_exception
        return self.responses[url]

    def get(self, url, **kwargs):
        return self._request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._request("POST", url, **kwargs)


TOKEN_URL = "https://id.example.com/oauth2/token"


def token_client(session):
    return TokenClient(session, "cid", "csecret", "rtoken", token_url=TOKEN_URL)


@pytest.mark.asyncio
async def test_fetch_access_token_posts_refresh_grant():
    session = FakeSession({TOKEN_URL: FakeResp(200, {"access_token": "atoken"})})
    client = token_client(session)
    assert await client.fetch_access_token() == "atoken"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", TOKEN_URL)
    assert kwargs["data"] == {
        "grant_type": "refresh_token",
        "client_id": "cid",
        "client_secret": "csecret",
        "refresh_token": "rtoken",
    }


@pytest.mark.asyncio
async def test_rotated_refresh_token_is_kept():
    session = FakeSession({TOKEN_URL: FakeResp(200, {"access_token": "a", "refresh_token": "r2"})})
    client = token_client(session)
    await client.fetch_access_token()
    assert client.refresh_token == "r2"


@pytest.mark.asyncio
async def test_token_response_without_access_token():
    session = FakeSession({TOKEN_URL: FakeResp(200, {"error": "nope"})})
    with pytest.raises(ParsingError):
        await token_client(session).fetch_access_token()


@pytest.mark.asyncio
async def test_token_unauthorized():
    session = FakeSession({TOKEN_URL: FakeResp(401)})
    with pytest.raises(OAuthError):
        await token_client(session).fetch_access_token()


@pytest.mark.asyncio
async def test_token_network_failure():
    session = FakeSession({}, raise_exception=OSError("unreachable"))
    with pytest.raises(NetworkError):
        await token_client(session).fetch_access_token()


def test_clients_require_session():
    with pytest.raises(ValueError):
        TokenClient(None, "a", "b", "c")
    with pytest.raises(ValueError):
        MusicServiceClient(None, "http://x")


BASE = "https://web.example.com"


@pytest.mark.asyncio
async def test_active_users():
    session = FakeSession({f"{BASE}/api/active": FakeResp(200, {"users": ["a", "b"]})})
    client = MusicServiceClient(session, BASE + "/")
    assert await client.active_users() == ["a", "b"]


@pytest.mark.asyncio
async def test_active_users_malformed_body():
    session = FakeSession({f"{BASE}/api/active": FakeResp(200, {"users": "not-a-list"})})
    with pytest.raises(ParsingError):
        await MusicServiceClient(session, BASE).active_users()


@pytest.mark.asyncio
async def test_now_playing_uses_channel_login():
    payload = {
        "is_playing": True,
        "item": {"name": "Title", "artists": [{"name": "Band"}], "external_urls": {"spotify": "u"}},
    }
    session = FakeSession({f"{BASE}/api/spotify/song": FakeResp(200, payload)})
    status = await MusicServiceClient(session, BASE).now_playing("#Streamer")
    assert status.track is not None
    assert status.track.display == "Band - Title"
    assert session.calls[0][2]["params"] == {"channel_name": "streamer"}


@pytest.mark.asyncio
async def test_now_playing_paused_has_no_track():
    payload = {"is_playing": False, "item": {"name": "Title"}}
    session = FakeSession({f"{BASE}/api/spotify/song": FakeResp(200, payload)})
    status = await MusicServiceClient(session, BASE).now_playing("#s")
    assert status.track is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method_name", "path"),
    [
        ("skip", "/api/spotify/skip"),
        ("enable_skip", "/api/commands/skip/add"),
        ("disable_skip", "/api/commands/skip/remove"),
    ],
)
async def test_actions_report_success_by_status(method_name, path):
    ok = FakeSession({f"{BASE}{path}": FakeResp(204)})
    rejected = FakeSession({f"{BASE}{path}": FakeResp(403)})
    assert await getattr(MusicServiceClient(ok, BASE), method_name)("#s") is True
    assert await getattr(MusicServiceClient(rejected, BASE), method_name)("#s") is False
    assert ok.calls[0][0] == "POST"
    assert ok.calls[0][2]["params"] == {"channel_name": "s"}
