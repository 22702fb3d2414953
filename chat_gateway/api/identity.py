"""OAuth refresh-token client used to obtain the chat credential."""

from __future__ import annotations

import aiohttp

from ..errors.handling import handle_api_error
from ..errors.internal import ParsingError


class TokenClient:
    """Exchanges the configured refresh token for a fresh access token.

    Called once per connection generation, before the handshake.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        token_url: str = "https://id.twitch.tv/oauth2/token",
        timeout: float = 30.0,
    ) -> None:
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.token_url = token_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch_access_token(self) -> str:
        """Return a bearer access token.

        Raises:
            NetworkError: Transport failure or 5xx.
            OAuthError: Credentials rejected.
            ParsingError: Response without ``access_token``.
        """

        async def operation() -> str:
            data = {
                "grant_type": "refresh_token",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": self.refresh_token,
            }
            async with self._session.post(
                self.token_url, data=data, timeout=self._timeout
            ) as resp:
                resp.raise_for_status()
                body = await resp.json()
            token = body.get("access_token") if isinstance(body, dict) else None
            if not token:
                raise ParsingError("Missing access_token in refresh response")
            # A rotated refresh token replaces the configured one for later generations
            rotated = body.get("refresh_token")
            if isinstance(rotated, str) and rotated:
                self.refresh_token = rotated
            return token

        return await handle_api_error(operation, "token refresh")
