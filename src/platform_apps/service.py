"""
Platform app asset acquisition.

Downloads an asset an app refers to into the app's assets directory, hashes
it, and records the checksum so the host can later tell which assets are
present.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

import aiohttp

from clientcore.download.checksum import DEFAULT_ALGORITHM, get_checksum
from clientcore.download.streaming import CHUNK_SIZE, download_file
from clientcore.logging.context_managers import LogContext
from platform_apps.exceptions import InvalidAppError, InvalidAssetError
from platform_apps.models import LoadedApp
from platform_apps.paths import (
    DEFAULT_MEDIA_APPS_SUBPATH,
    asset_filename_from_url,
    get_app_assets_dir,
    is_valid_asset_filename,
)
from platform_apps.registry import AppRegistry
from platform_apps.store import AssetCacheStore

logger = logging.getLogger(__name__)

Downloader = Callable[..., Awaitable[None]]
ChecksumFn = Callable[..., Awaitable[str]]


class PlatformAppAssetsService:
    """
    Fetches app assets and keeps their checksums.

    Each call to add_platform_app_asset runs its steps strictly in order:
    validate app, resolve URL, ensure directory, download, checksum, record.
    A checksum is recorded only after both the download and the hash succeed.
    Concurrent calls for the same asset are not coordinated; the last record
    wins.

    Args:
        registry: Source of loaded apps and asset URL resolution
        cache_store: Checksum table
        user_data_dir: Root of the host's user data
        media_apps_subpath: Path segments between user_data_dir and the app folder
        session: Shared aiohttp session for downloads (one per download if omitted)
        chunk_size: Download chunk size in bytes
        checksum_algorithm: hashlib algorithm name
        downloader: Download coroutine, ``(url, dst_path, session=, chunk_size=)``
        checksum: Checksum coroutine, ``(file_path, algorithm=)``
    """

    def __init__(
        self,
        registry: AppRegistry,
        cache_store: AssetCacheStore,
        user_data_dir: str | Path,
        media_apps_subpath: Sequence[str] = DEFAULT_MEDIA_APPS_SUBPATH,
        session: aiohttp.ClientSession | None = None,
        chunk_size: int = CHUNK_SIZE,
        checksum_algorithm: str = DEFAULT_ALGORITHM,
        downloader: Downloader | None = None,
        checksum: ChecksumFn | None = None,
    ):
        self.registry = registry
        self.cache_store = cache_store
        self.user_data_dir = Path(user_data_dir)
        self.media_apps_subpath = tuple(media_apps_subpath)
        self.chunk_size = chunk_size
        self.checksum_algorithm = checksum_algorithm
        self._session = session
        self._download = downloader or download_file
        self._checksum = checksum or get_checksum

    def get_asset(self, app_id: str, asset_name: str) -> str | None:
        """Recorded checksum of an asset, or None."""
        return self.cache_store.lookup(app_id, asset_name)

    def has_asset(self, app_id: str, asset_name: str) -> bool:
        return self.cache_store.has(app_id, asset_name)

    def _require_app(self, app_id: str) -> LoadedApp:
        app = self.registry.get_app(app_id)
        if app is None:
            raise InvalidAppError(app_id)
        return app

    async def get_assets_target_directory(self, app_id: str) -> Path:
        """
        Return the app's assets directory, creating it if needed.

        Raises:
            InvalidAppError: app_id is not loaded
            OSError: Directory cannot be created
        """
        self._require_app(app_id)
        target = get_app_assets_dir(self.user_data_dir, app_id, self.media_apps_subpath)
        await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        return target

    async def add_platform_app_asset(
        self,
        app_id: str,
        asset_url: str,
        force: bool = False,
    ) -> Path:
        """
        Download an app asset and record its checksum under asset_url.

        The asset is always downloaded; ``force`` is accepted for API
        compatibility and an existing checksum is never consulted.

        Returns:
            Path of the downloaded file

        Raises:
            InvalidAppError: app_id is not loaded (raised before any I/O)
            InvalidAssetError: asset_url does not resolve to a file URL
            DownloadError: Server refused the download
            aiohttp.ClientError: Connection or stream failure
            OSError: Directory, file or hashing I/O failure
        """
        with LogContext(app_id=app_id, asset=asset_url, operation="add_platform_app_asset"):
            return await self._fetch_and_record(app_id, asset_url, force)

    def _resolve_destination_name(self, app_id: str, asset_url: str) -> tuple[str, str]:
        """Validate the app and return (resolved URL, file name) without touching disk."""
        self._require_app(app_id)

        resolved_url = self.registry.get_asset_url(app_id, asset_url)
        if not resolved_url:
            raise InvalidAssetError(app_id, asset_url, "app has no base URL to resolve against")

        filename = asset_filename_from_url(resolved_url)
        if not is_valid_asset_filename(filename):
            raise InvalidAssetError(app_id, asset_url, f"URL does not name a file: {filename!r}")
        return resolved_url, filename

    async def _fetch_and_record(self, app_id: str, asset_url: str, force: bool) -> Path:
        resolved_url, filename = self._resolve_destination_name(app_id, asset_url)

        target_dir = await self.get_assets_target_directory(app_id)
        destination = target_dir / filename

        logger.info(
            "Downloading platform app asset",
            extra={
                "app_id": app_id,
                "asset": asset_url,
                "download_url": resolved_url,
                "destination_path": str(destination),
                "force": force,
            },
        )

        start = time.perf_counter()
        await self._download(
            resolved_url, destination, session=self._session, chunk_size=self.chunk_size
        )
        checksum = await self._checksum(destination, algorithm=self.checksum_algorithm)
        await asyncio.to_thread(self.cache_store.record, app_id, asset_url, checksum)

        logger.info(
            "Platform app asset stored",
            extra={
                "app_id": app_id,
                "asset": asset_url,
                "destination_path": str(destination),
                "checksum": checksum,
                "checksum_algorithm": self.checksum_algorithm,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
            },
        )
        return destination


__all__ = ["PlatformAppAssetsService"]
