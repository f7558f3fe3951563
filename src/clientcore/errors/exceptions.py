"""
Exception hierarchy for the client core.

Provides typed exceptions with an error category so callers (UI collaborators,
platform services) can render a message or decide whether a refresh helps,
without branching on raw status codes.
"""

import asyncio
import errno
from typing import Any

import aiohttp

# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from clientcore.types import ErrorCategory


class ClientError(Exception):
    """
    Base exception for all client core errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for handling decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)

    @property
    def should_refresh_auth(self) -> bool:
        return self.category == ErrorCategory.AUTH

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Base categories
# =============================================================================


class AuthError(ClientError):
    """Base class for authentication errors."""

    category = ErrorCategory.AUTH


class PermanentError(ClientError):
    """Base class for errors that will not go away on their own."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# HTTP Errors
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code == 401:
        return ErrorCategory.AUTH

    if status_code == 429:
        return ErrorCategory.TRANSIENT  # Rate limited

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


class HttpResponseError(ClientError):
    """
    Non-success response from a JSON endpoint.

    Carries the parsed error body so upstream collaborators can render the
    server's own message.

    Attributes:
        status_code: HTTP status code of the response
        body: Parsed response body (whatever the endpoint returned)
        url: Request URL
    """

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        url: str | None = None,
    ):
        super().__init__(
            f"HTTP {status_code}" + (f": {url}" if url else ""),
            context={"status_code": status_code, "url": url},
        )
        self.status_code = status_code
        self.body = body
        self.url = url

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        return classify_http_status(self.status_code)


class DownloadError(ClientError):
    """
    Binary download could not start because the server refused it.

    Raised before anything is written to disk.
    """

    def __init__(self, status_code: int, url: str):
        super().__init__(
            f"Download failed with HTTP {status_code}: {url}",
            context={"status_code": status_code, "url": url},
        )
        self.status_code = status_code
        self.url = url

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        return classify_http_status(self.status_code)


# =============================================================================
# Classification Utilities
# =============================================================================


def classify_os_error(error: OSError) -> ErrorCategory:
    """
    Classify OSError by errno into error category.

    Conservative classification: only mark as PERMANENT if certain.
    Disk full (ENOSPC), read-only filesystem (EROFS), permission denied (EACCES/EPERM).
    """
    permanent_errnos = (errno.ENOSPC, errno.EROFS, errno.EACCES, errno.EPERM)
    return ErrorCategory.PERMANENT if error.errno in permanent_errnos else ErrorCategory.TRANSIENT


def get_status_code(exc: BaseException) -> int | None:
    """Return the HTTP status carried by an exception, if any."""
    status = getattr(exc, "status_code", None)
    if status is None:
        # aiohttp.ClientResponseError and raw responses use `status`
        status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def is_auth_error(exc: BaseException) -> bool:
    """
    Check if exception is an unauthorized (401) response.

    Returns True if this error should trigger a token refresh.
    """
    if isinstance(exc, ClientError) and exc.should_refresh_auth:
        return True
    return get_status_code(exc) == 401


def classify_exception(exc: BaseException) -> ErrorCategory:
    """Classify an exception into error category."""
    # Already classified
    if isinstance(exc, ClientError):
        return exc.category

    # Connection, timeout and mid-stream failures
    if isinstance(exc, (aiohttp.ClientError, asyncio.TimeoutError)):
        return ErrorCategory.TRANSIENT

    if isinstance(exc, OSError):
        return classify_os_error(exc)

    return ErrorCategory.UNKNOWN


def is_retryable_error(exc: BaseException) -> bool:
    """
    Check if exception may succeed when the operation is repeated.

    Unknown errors count as retryable.
    """
    if isinstance(exc, ClientError):
        return exc.is_retryable
    return classify_exception(exc) in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)


__all__ = [
    "ClientError",
    "AuthError",
    "PermanentError",
    "HttpResponseError",
    "DownloadError",
    "classify_http_status",
    "classify_os_error",
    "classify_exception",
    "get_status_code",
    "is_auth_error",
    "is_retryable_error",
]
