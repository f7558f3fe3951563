"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_app_id: ContextVar[str] = ContextVar("app_id", default="")
_asset: ContextVar[str] = ContextVar("asset", default="")
_operation: ContextVar[str] = ContextVar("operation", default="")
_platform: ContextVar[str] = ContextVar("platform", default="")


def set_log_context(
    app_id: Optional[str] = None,
    asset: Optional[str] = None,
    operation: Optional[str] = None,
    platform: Optional[str] = None,
) -> None:
    if app_id is not None:
        _app_id.set(app_id)
    if asset is not None:
        _asset.set(asset)
    if operation is not None:
        _operation.set(operation)
    if platform is not None:
        _platform.set(platform)


def get_log_context() -> Dict[str, str]:
    return {
        "app_id": _app_id.get(),
        "asset": _asset.get(),
        "operation": _operation.get(),
        "platform": _platform.get(),
    }


def clear_log_context() -> None:
    _app_id.set("")
    _asset.set("")
    _operation.set("")
    _platform.set("")
