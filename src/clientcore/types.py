"""
Core types and protocols used across modules.

This module provides base enums and protocol definitions shared across the
client core so that error handling and token refresh look the same everywhere.
"""

from enum import Enum
from typing import Protocol


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed later
                   (e.g., network timeouts, 429/503 errors)
        AUTH: Authentication failures requiring credential refresh
              (e.g., 401 errors, expired tokens)
        PERMANENT: Failures that won't succeed on retry
                   (e.g., 404, unknown application, validation errors)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class TokenRefresher(Protocol):
    """
    Protocol for the authentication collaborator.

    Implementations replace the platform access token; once ``refresh_token``
    returns, subsequent requests must pick up the new token.
    """

    async def refresh_token(self) -> None:
        """
        Obtain a fresh access token and make it available to later calls.

        Raises:
            HttpResponseError: If the refresh endpoint rejects the request
        """
        ...


__all__ = [
    "ErrorCategory",
    "TokenRefresher",
]
