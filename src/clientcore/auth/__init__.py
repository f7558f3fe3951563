"""
Authentication helpers.

Provides:
    - call_with_token_refresh / with_token_refresh: retry-once-on-401 middleware
    - requires_token: method decorator form of the same middleware
    - PlatformAuth: platform credentials shared by clients
    - TokenRefreshClient: refresh collaborator backed by the host API

Example usage:
    from clientcore.auth import with_token_refresh

    fetch = with_token_refresh(client.fetch_raw_channel_info, refresher.refresh_token)
    channel = await fetch()
"""

from clientcore.auth.token_refresh import (
    call_with_token_refresh,
    is_unauthorized,
    requires_token,
    with_token_refresh,
)
from clientcore.auth.tokens import PlatformAuth, TokenRefreshClient

__all__ = [
    # Middleware
    "call_with_token_refresh",
    "with_token_refresh",
    "requires_token",
    "is_unauthorized",
    # Credentials
    "PlatformAuth",
    "TokenRefreshClient",
]
