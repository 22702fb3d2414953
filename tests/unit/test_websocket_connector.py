"""
Unit tests for WebSocketConnector.
"""

from unittest.mock import AsyncMock, patch

import pytest
import websockets

from chat_gateway.chat.websocket_connector import TWITCH_IRC_WS_URL, WebSocketConnector
from chat_gateway.errors.gateway import TransportError


class TestWebSocketConnector:
    """Test class for WebSocketConnector functionality."""

    def setup_method(self):
        self.connector = WebSocketConnector(open_timeout=2.0)

    def test_init_defaults(self):
        assert self.connector.ws_url == TWITCH_IRC_WS_URL
        assert self.connector.ws is None
        assert not self.connector.connected

    @pytest.mark.asyncio
    async def test_connect_success(self):
        mock_ws = AsyncMock()
        with patch("websockets.connect", new_callable=AsyncMock) as mock_connect:
            mock_connect.return_value = mock_ws
            await self.connector.connect()
        assert self.connector.ws is mock_ws
        assert self.connector.connected
        mock_connect.assert_called_once_with(TWITCH_IRC_WS_URL, open_timeout=2.0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [OSError("refused"), TimeoutError(), websockets.InvalidURI("bad", "no scheme")],
    )
    async def test_connect_failure_raises_transport_error(self, error):
        with patch("websockets.connect", new_callable=AsyncMock, side_effect=error):
            with pytest.raises(TransportError) as exc_info:
                await self.connector.connect()
        assert exc_info.value.operation_type == "connect"
        assert self.connector.ws is None

    @pytest.mark.asyncio
    async def test_connect_closes_previous_connection(self):
        old_ws = AsyncMock()
        self.connector.ws = old_ws
        with patch("websockets.connect", new_callable=AsyncMock, return_value=AsyncMock()):
            await self.connector.connect()
        old_ws.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_send_and_receive_require_connection(self):
        with pytest.raises(TransportError):
            await self.connector.send_line("PING")
        with pytest.raises(TransportError):
            await self.connector.receive_frame()

    @pytest.mark.asyncio
    async def test_send_line_writes_text(self):
        self.connector.ws = AsyncMock()
        await self.connector.send_line("PRIVMSG #c :hi")
        self.connector.ws.send.assert_awaited_once_with("PRIVMSG #c :hi")

    @pytest.mark.asyncio
    async def test_send_failure_raises_transport_error(self):
        self.connector.ws = AsyncMock()
        self.connector.ws.send.side_effect = OSError("broken pipe")
        with pytest.raises(TransportError) as exc_info:
            await self.connector.send_line("x")
        assert exc_info.value.operation_type == "send"

    @pytest.mark.asyncio
    async def test_receive_decodes_binary_frames(self):
        self.connector.ws = AsyncMock()
        self.connector.ws.recv.return_value = b"PING :tmi.twitch.tv\r\n"
        assert await self.connector.receive_frame() == "PING :tmi.twitch.tv\r\n"

    @pytest.mark.asyncio
    async def test_receive_on_closed_connection_raises_transport_error(self):
        self.connector.ws = AsyncMock()
        self.connector.ws.recv.side_effect = websockets.ConnectionClosedError(None, None)
        with pytest.raises(TransportError) as exc_info:
            await self.connector.receive_frame()
        assert exc_info.value.operation_type == "receive"

    @pytest.mark.asyncio
    async def test_disconnect_swallows_close_errors(self):
        ws = AsyncMock()
        ws.close.side_effect = OSError("already gone")
        self.connector.ws = ws
        await self.connector.disconnect()
        assert self.connector.ws is None
        await self.connector.disconnect()
