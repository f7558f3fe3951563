"""
Client core: reusable building blocks for talking to remote platform services.

Modules:
    auth      - Token-refresh retry middleware and platform token refresher
    http      - Response normalization, authorized headers, session factory, API client
    download  - Streaming asset download and content checksums
    errors    - Error classification and exception hierarchy
    logging   - Structured JSON/console logging with context propagation

Design Principles:
    - No knowledge of which application is loaded or where state is persisted
    - Async-first; blocking filesystem calls are offloaded to threads
    - Failures surface as exceptions carrying status/body or the native I/O error
"""

from .types import ErrorCategory, TokenRefresher

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
    "TokenRefresher",
]
