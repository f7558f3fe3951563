"""Context managers for structured logging."""

from typing import Dict, Optional

from clientcore.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Fields given here apply to every log line inside the block; the previous
    values are restored on exit, including when the block raises.

    Usage:
        with LogContext(app_id="app-1", asset="transition.mp4"):
            # All logs in this block carry app_id and asset
            await fetch_asset()
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        asset: Optional[str] = None,
        operation: Optional[str] = None,
        platform: Optional[str] = None,
    ):
        self.new_context = {
            "app_id": app_id,
            "asset": asset,
            "operation": operation,
            "platform": platform,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        set_log_context(**self.new_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_log_context(**self.old_context)
        return False


__all__ = ["LogContext"]
