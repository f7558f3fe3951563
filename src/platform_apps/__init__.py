"""
Platform app asset layer.

Components:
    - models: LoadedApp and AppManifest
    - registry: AppRegistry boundary and in-memory PlatformAppsRegistry
    - state: durable JSON checksum table
    - store: AssetCacheStore (lookup / has / record)
    - service: PlatformAppAssetsService, download + checksum + record
    - factory: build the service from configuration

Example usage:
    from config import get_config
    from platform_apps import PlatformAppsRegistry, build_assets_service

    registry = PlatformAppsRegistry([app])
    service = build_assets_service(get_config(), registry)
    path = await service.add_platform_app_asset("app-1", "transition.mp4")
"""

from platform_apps.exceptions import InvalidAppError, InvalidAssetError, StateLoadError
from platform_apps.factory import build_assets_service, build_session, configure_logging
from platform_apps.models import AppManifest, LoadedApp
from platform_apps.registry import AppRegistry, PlatformAppsRegistry
from platform_apps.service import PlatformAppAssetsService
from platform_apps.state import JsonStateStore, StateStore
from platform_apps.store import AssetCacheStore

__all__ = [
    # Models
    "AppManifest",
    "LoadedApp",
    # Registry
    "AppRegistry",
    "PlatformAppsRegistry",
    # Storage
    "StateStore",
    "JsonStateStore",
    "AssetCacheStore",
    # Service
    "PlatformAppAssetsService",
    "build_assets_service",
    "build_session",
    "configure_logging",
    # Errors
    "InvalidAppError",
    "InvalidAssetError",
    "StateLoadError",
]
