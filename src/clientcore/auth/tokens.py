"""Platform credentials and the token refresh collaborator."""

import logging
from dataclasses import dataclass

import aiohttp

from clientcore.errors.exceptions import AuthError
from clientcore.http.client import authorized_headers, handle_response

logger = logging.getLogger(__name__)


@dataclass
class PlatformAuth:
    """
    Credentials for a connected streaming platform.

    Attributes:
        api_token: Long-lived host API token, used to ask for new platform tokens
        access_token: Platform OAuth access token sent as the bearer credential
        platform_id: Account ID on the platform
        username: Account login on the platform
    """

    api_token: str
    access_token: str
    platform_id: str | None = None
    username: str | None = None

    def update_platform_token(self, access_token: str) -> None:
        self.access_token = access_token


class TokenRefreshClient:
    """
    Asks the host's refresh endpoint for a new platform access token.

    The endpoint is authorized with the host API token and answers with
    ``{"access_token": "..."}``. The new token is written into the shared
    PlatformAuth so subsequent requests use it.

    Usage:
        refresher = TokenRefreshClient(
            "https://streamlabs.com/api/v5/slobs/twitch/refresh", auth, session
        )
        await refresher.refresh_token()
    """

    def __init__(
        self,
        refresh_url: str,
        auth: PlatformAuth,
        session: aiohttp.ClientSession,
    ):
        if not refresh_url:
            raise ValueError("TokenRefreshClient requires 'refresh_url'")

        self.refresh_url = refresh_url
        self.auth = auth
        self._session = session

    async def refresh_token(self) -> None:
        """
        Fetch a new access token and store it on the PlatformAuth.

        Raises:
            HttpResponseError: Refresh endpoint returned a non-2xx status
            AuthError: Response did not contain an access token
        """
        headers = authorized_headers(self.auth.api_token)

        async with self._session.get(self.refresh_url, headers=headers) as response:
            data = await handle_response(response)

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise AuthError(
                "Token refresh response did not include an access token",
                context={"url": self.refresh_url},
            )

        self.auth.update_platform_token(access_token)
        logger.info("Platform access token refreshed", extra={"http_url": self.refresh_url})


__all__ = ["PlatformAuth", "TokenRefreshClient"]
