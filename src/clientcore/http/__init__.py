"""
HTTP request helpers and the authenticated platform client.

Components:
    - client: response normalizer, authorized headers, session factory
    - api_client: PlatformApiClient with refresh-and-replay on 401
"""

from clientcore.http.client import (
    authorized_headers,
    create_session,
    handle_response,
    is_success,
    is_url,
)
from clientcore.http.api_client import PlatformApiClient

__all__ = [
    "handle_response",
    "authorized_headers",
    "create_session",
    "is_success",
    "is_url",
    "PlatformApiClient",
]
