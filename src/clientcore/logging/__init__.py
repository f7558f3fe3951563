"""
Structured logging module.

Provides JSON logging with context propagation (app, asset, platform).
"""

from clientcore.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from clientcore.logging.context_managers import LogContext
from clientcore.logging.formatters import ConsoleFormatter, JSONFormatter
from clientcore.logging.setup import (
    get_log_file_path,
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    "get_log_file_path",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    "LogContext",
]
