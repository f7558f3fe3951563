"""Authenticated JSON client for a streaming platform's REST API."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp
from multidict import CIMultiDict

from clientcore.auth.token_refresh import requires_token
from clientcore.http.client import authorized_headers, handle_response
from clientcore.logging.context import get_log_context
from clientcore.types import TokenRefresher

if TYPE_CHECKING:
    from clientcore.auth.tokens import PlatformAuth

logger = logging.getLogger(__name__)


class PlatformApiClient:
    """
    Async client for a platform REST API with refresh-and-replay on 401.

    Headers are rebuilt on every attempt, so a replay after a refresh carries
    the new access token. Platform-specific endpoints live in subclasses or
    callers; this class only knows how to send authenticated JSON requests.

    Usage:
        async with PlatformApiClient(
            "https://api.twitch.tv", auth, refresher, client_id="abc"
        ) as client:
            channel = await client.request_with_token("GET", "/kraken/channel")
    """

    def __init__(
        self,
        base_url: str,
        auth: "PlatformAuth",
        refresher: TokenRefresher,
        session: aiohttp.ClientSession | None = None,
        client_id: str | None = None,
        timeout_seconds: int = 30,
    ):
        self.base_url = base_url.rstrip("/") if base_url else ""

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"PlatformApiClient base_url must start with http:// or https://, got: {base_url!r}"
            )

        self.auth = auth
        self.client_id = client_id
        self.timeout_seconds = timeout_seconds
        self._refresher = refresher
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "PlatformApiClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0)
        self._session = None

    async def fetch_new_token(self) -> None:
        """Ask the auth collaborator for a new access token."""
        await self._refresher.refresh_token()

    def get_headers(self, authorized: bool = False) -> CIMultiDict:
        """Build request headers, adding the current bearer token when authorized."""
        headers: CIMultiDict = CIMultiDict()
        headers.add("Accept", "application/json")
        headers.add("Content-Type", "application/json")
        if self.client_id:
            headers.add("Client-Id", self.client_id)

        if authorized:
            authorized_headers(self.auth.access_token, headers)
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        json_body: Any = None,
        params: dict[str, str] | None = None,
        authorized: bool = True,
    ) -> Any:
        """
        Send one request and return the parsed JSON body.

        Raises:
            HttpResponseError: Non-2xx response (parsed error body attached)
            aiohttp.ClientError: Connection-level failure
        """
        session = self._ensure_session()
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        logger.debug(
            "API request starting",
            extra={
                **{k: v for k, v in get_log_context().items() if v},
                "api_endpoint": endpoint,
                "http_method": method,
                "http_url": url,
            },
        )

        async with session.request(
            method,
            url,
            params=params,
            json=json_body,
            headers=self.get_headers(authorized),
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as response:
            return await handle_response(response)

    @requires_token()
    async def request_with_token(
        self,
        method: str,
        endpoint: str,
        json_body: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Authorized request; on 401 the token is refreshed and the request replayed once."""
        return await self.request(method, endpoint, json_body=json_body, params=params)


__all__ = ["PlatformApiClient"]
