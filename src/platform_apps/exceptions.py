"""Domain errors raised by the platform app asset layer."""

from clientcore.errors.exceptions import PermanentError


class InvalidAppError(PermanentError):
    """No loaded app matches the requested id."""

    def __init__(self, app_id: str):
        super().__init__(
            f"Invalid platform app: {app_id!r}",
            context={"app_id": app_id},
        )
        self.app_id = app_id


class InvalidAssetError(PermanentError):
    """Asset reference cannot be turned into a downloadable file name."""

    def __init__(self, app_id: str, asset_url: str, reason: str):
        super().__init__(
            f"Invalid asset {asset_url!r} for app {app_id!r}: {reason}",
            context={"app_id": app_id, "asset": asset_url},
        )
        self.app_id = app_id
        self.asset_url = asset_url


class StateLoadError(PermanentError):
    """Persisted asset state exists but does not have the expected shape."""


__all__ = ["InvalidAppError", "InvalidAssetError", "StateLoadError"]
