"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- ClientError hierarchy for typed exceptions
- Classification utilities for error handling
"""

from clientcore.errors.exceptions import (
    AuthError,
    # Base classes
    ClientError,
    # HTTP errors
    DownloadError,
    HttpResponseError,
    PermanentError,
    # Classification utilities
    classify_exception,
    classify_http_status,
    classify_os_error,
    get_status_code,
    is_auth_error,
    is_retryable_error,
)
from clientcore.types import ErrorCategory

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "ClientError",
    "AuthError",
    "PermanentError",
    # HTTP errors
    "HttpResponseError",
    "DownloadError",
    # Classification utilities
    "classify_http_status",
    "classify_os_error",
    "classify_exception",
    "get_status_code",
    "is_auth_error",
    "is_retryable_error",
]
