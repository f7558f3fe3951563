"""
HTTP helpers shared by every platform client.

Provides the small pieces each request is assembled from:
- create_session: aiohttp ClientSession with pooling and timeouts
- authorized_headers: bearer Authorization header on a header collection
- handle_response: turn a response into a parsed body or an HttpResponseError
"""

import json
import logging
import re
from collections.abc import MutableMapping
from typing import Any

import aiohttp
from multidict import CIMultiDict

from clientcore.errors.exceptions import HttpResponseError

logger = logging.getLogger(__name__)

_URL_PATTERN = re.compile(r"^https?:")


def is_success(status_code: int) -> bool:
    """Any 2xx status counts as success."""
    return 200 <= status_code < 300


def is_url(value: str) -> bool:
    """True if value is an absolute http(s) URL."""
    return bool(_URL_PATTERN.match(value))


async def handle_response(response: aiohttp.ClientResponse) -> Any:
    """
    Normalize a completed response into a parsed body or an exception.

    The body is parsed as JSON on both paths. On a 2xx status the parsed body
    is returned; on anything else it is raised inside an HttpResponseError so
    callers never have to look at status codes themselves.

    An empty 2xx body (e.g. 204 No Content) yields None. A failure body that
    is empty or not JSON raises the parse error itself.

    Args:
        response: aiohttp response (body not yet consumed)

    Returns:
        Parsed JSON body, or None for an empty 2xx body

    Raises:
        HttpResponseError: Non-2xx status, with the parsed body attached
        json.JSONDecodeError: Failure body is empty or not valid JSON
    """
    # Read as text: servers are not consistent about application/json
    text = await response.text()

    if is_success(response.status):
        return json.loads(text) if text.strip() else None

    body = json.loads(text)
    logger.debug(
        "Request rejected by server",
        extra={"http_status": response.status, "http_url": str(response.url)},
    )
    raise HttpResponseError(status_code=response.status, body=body, url=str(response.url))


def authorized_headers(
    token: str,
    headers: MutableMapping[str, str] | None = None,
) -> MutableMapping[str, str]:
    """
    Generate authorized headers per the OAuth bearer standard.

    If headers are not passed, a new header collection is created. Multi-value
    collections get an extra Authorization entry appended; plain mappings get
    the key set.

    Args:
        token: OAuth access token
        headers: Headers to append to

    Returns:
        The same (now mutated) header collection
    """
    if headers is None:
        headers = CIMultiDict()

    value = f"Bearer {token}"
    if hasattr(headers, "add"):
        headers.add("Authorization", value)
    else:
        headers["Authorization"] = value
    return headers


def create_session(
    max_connections: int = 100,
    max_connections_per_host: int = 10,
    enable_ssl: bool = True,
    timeout_total: int | None = None,
    timeout_connect: int = 30,
    timeout_sock_read: int | None = None,
) -> aiohttp.ClientSession:
    """
    Create aiohttp ClientSession with connection pooling.

    No total or read timeout is applied by default; downloads of large assets
    are allowed to take as long as the server keeps sending data.

    Args:
        max_connections: Total connection pool size (default: 100)
        max_connections_per_host: Per-host connection limit (default: 10)
        enable_ssl: Enable SSL verification (default: True)
        timeout_total: Total timeout in seconds (default: None)
        timeout_connect: Connection timeout in seconds (default: 30)
        timeout_sock_read: Socket read timeout in seconds (default: None)

    Returns:
        Configured aiohttp.ClientSession

    Note:
        Caller is responsible for session lifecycle management.
        Use async context manager for automatic cleanup:

        async with create_session() as session:
            await download_file(url, path, session=session)
    """
    connector = aiohttp.TCPConnector(
        limit=max_connections,
        limit_per_host=max_connections_per_host,
        ssl=enable_ssl,
        ttl_dns_cache=300,
    )

    timeout = aiohttp.ClientTimeout(
        total=timeout_total,
        connect=timeout_connect,
        sock_read=timeout_sock_read,
    )

    return aiohttp.ClientSession(connector=connector, timeout=timeout)


__all__ = [
    "is_success",
    "is_url",
    "handle_response",
    "authorized_headers",
    "create_session",
]
