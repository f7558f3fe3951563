"""
Loaded platform app models.

A LoadedApp is the host's view of an installed app: its manifest plus where
its files are served from. Packed apps are served from ``app_url``; unpacked
apps under development are served by a local dev server on ``dev_port``.
"""

from pydantic import BaseModel, Field


class AppManifest(BaseModel):
    """Subset of the app manifest the asset layer cares about."""

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    description: str | None = None


class LoadedApp(BaseModel):
    """An installed platform app.

    Attributes:
        id: App identifier, also the name of its assets directory
        manifest: Parsed app manifest
        unpacked: True for apps loaded from a local development folder
        app_path: Local folder of an unpacked app
        app_url: Base URL a packed app is served from
        dev_port: Port of the local dev server for unpacked apps
        enabled: Whether the app is currently enabled

    Example:
        >>> app = LoadedApp(
        ...     id="app-1",
        ...     manifest=AppManifest(name="Alerts", version="1.0.0"),
        ...     app_url="https://apps.example.com/app-1/1.0.0/",
        ... )
        >>> app.base_url
        'https://apps.example.com/app-1/1.0.0/'
    """

    id: str = Field(..., min_length=1, description="App identifier")
    manifest: AppManifest
    unpacked: bool = False
    app_path: str | None = None
    app_url: str | None = None
    dev_port: int | None = Field(default=None, ge=1, le=65535)
    enabled: bool = True

    @property
    def base_url(self) -> str | None:
        """URL relative asset references resolve against, with a trailing slash."""
        if self.unpacked and self.dev_port:
            return f"http://localhost:{self.dev_port}/"
        if not self.app_url:
            return None
        return self.app_url if self.app_url.endswith("/") else self.app_url + "/"


__all__ = ["AppManifest", "LoadedApp"]
