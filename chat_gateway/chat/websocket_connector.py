"""WebSocket transport for Twitch IRC: connect, send lines, receive frames."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import websockets

from ..constants import WEBSOCKET_CONNECT_TIMEOUT_SECONDS
from ..errors.gateway import TransportError

TWITCH_IRC_WS_URL = "wss://irc-ws.chat.twitch.tv:443"

WEBSOCKET_NOT_CONNECTED_ERROR = "WebSocket not connected"


class WebSocketConnector:
    """Owns one WebSocket connection per generation.

    Every failure is raised as ``TransportError`` so the orchestrator can
    treat open, read and write problems uniformly.

    Attributes:
        ws_url (str): WebSocket endpoint.
        ws: Active connection or None.
    """

    def __init__(
        self,
        ws_url: str = TWITCH_IRC_WS_URL,
        open_timeout: float = WEBSOCKET_CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self.ws_url = ws_url
        self.open_timeout = open_timeout
        self.ws: Any = None

    @property
    def connected(self) -> bool:
        return self.ws is not None

    async def connect(self) -> None:
        await self.disconnect()
        logging.info(f"🔌 Connecting to WebSocket at {self.ws_url}")
        try:
            self.ws = await websockets.connect(self.ws_url, open_timeout=self.open_timeout)
        except (OSError, TimeoutError, websockets.WebSocketException) as e:
            raise TransportError(
                f"WebSocket connection failed: {e}", operation_type="connect"
            ) from e
        logging.info("🔌 WebSocket connected successfully")

    async def send_line(self, line: str) -> None:
        if self.ws is None:
            raise TransportError(WEBSOCKET_NOT_CONNECTED_ERROR, operation_type="send")
        try:
            await self.ws.send(line)
        except (OSError, websockets.WebSocketException) as e:
            raise TransportError(
                f"WebSocket send failed: {e}", operation_type="send"
            ) from e

    async def receive_frame(self) -> str:
        """Return the next text frame; binary frames are decoded as UTF-8."""
        if self.ws is None:
            raise TransportError(WEBSOCKET_NOT_CONNECTED_ERROR, operation_type="receive")
        try:
            data = await self.ws.recv()
        except websockets.ConnectionClosed as e:
            raise TransportError(
                f"WebSocket closed: {e}", operation_type="receive"
            ) from e
        except (OSError, websockets.WebSocketException) as e:
            raise TransportError(
                f"WebSocket receive failed: {e}", operation_type="receive"
            ) from e
        if isinstance(data, bytes):
            return data.decode("utf-8", errors="replace")
        return data

    async def disconnect(self) -> None:
        """Close the connection; errors while closing are logged, not raised."""
        ws, self.ws = self.ws, None
        if ws is None:
            return
        try:
            await asyncio.wait_for(ws.close(), timeout=self.open_timeout)
            logging.info(
                f"🔌 WebSocket disconnected: code={getattr(ws, 'close_code', None)}"
            )
        except (OSError, TimeoutError, websockets.WebSocketException) as e:
            logging.warning(f"⚠️ WebSocket close error: {e}")
