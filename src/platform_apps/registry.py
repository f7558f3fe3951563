"""
App registry boundary.

The asset service only needs two questions answered: is this app loaded, and
what absolute URL does an asset reference point to. AppRegistry is that
boundary; PlatformAppsRegistry is the in-process implementation the host
populates as apps are installed and removed.
"""

import logging
from typing import Protocol
from urllib.parse import urljoin

from clientcore.http.client import is_url
from platform_apps.models import LoadedApp

logger = logging.getLogger(__name__)


class AppRegistry(Protocol):
    """Lookup surface the asset service depends on."""

    def get_app(self, app_id: str) -> LoadedApp | None: ...

    def get_asset_url(self, app_id: str, asset_url: str) -> str | None: ...


class PlatformAppsRegistry:
    """In-memory registry of loaded apps keyed by id."""

    def __init__(self, apps: list[LoadedApp] | None = None):
        self._apps: dict[str, LoadedApp] = {}
        for app in apps or []:
            self.load_app(app)

    def load_app(self, app: LoadedApp) -> None:
        """Register app, replacing any app already loaded under the same id."""
        if app.id in self._apps:
            logger.info("Reloading platform app", extra={"app_id": app.id})
        else:
            logger.info("Loaded platform app", extra={"app_id": app.id})
        self._apps[app.id] = app

    def unload_app(self, app_id: str) -> None:
        if self._apps.pop(app_id, None) is not None:
            logger.info("Unloaded platform app", extra={"app_id": app_id})

    @property
    def enabled_apps(self) -> list[LoadedApp]:
        return [app for app in self._apps.values() if app.enabled]

    def get_app(self, app_id: str) -> LoadedApp | None:
        return self._apps.get(app_id)

    def get_asset_url(self, app_id: str, asset_url: str) -> str | None:
        """
        Resolve an asset reference to an absolute URL.

        Absolute http(s) references are returned unchanged. Relative ones are
        joined onto the app's base URL. Returns None when the app is unknown
        or has nowhere to serve relative assets from.
        """
        app = self.get_app(app_id)
        if app is None:
            return None

        if is_url(asset_url):
            return asset_url

        base_url = app.base_url
        if base_url is None:
            return None
        return urljoin(base_url, asset_url.lstrip("/"))


__all__ = ["AppRegistry", "PlatformAppsRegistry"]
