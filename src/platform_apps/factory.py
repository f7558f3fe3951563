"""Wiring of the asset service from configuration."""

import logging
from pathlib import Path

import aiohttp

from clientcore.http.client import create_session
from clientcore.logging.setup import setup_logging
from config.config import ClientConfig
from platform_apps.registry import AppRegistry
from platform_apps.service import PlatformAppAssetsService
from platform_apps.state import JsonStateStore
from platform_apps.store import AssetCacheStore


def configure_logging(config: ClientConfig, name: str = "platform_apps") -> logging.Logger:
    """Apply the logging section of config."""
    return setup_logging(
        name=name,
        log_dir=Path(config.log_dir),
        json_format=config.log_json_format,
        console_level=getattr(logging, config.log_console_level.upper()),
        log_to_stdout=config.log_to_stdout,
    )


def build_session(config: ClientConfig) -> aiohttp.ClientSession:
    """Create a download session with the configured pool and timeouts.

    Must be called from a running event loop; the caller owns and closes it.
    """
    return create_session(
        max_connections=config.http_max_connections,
        max_connections_per_host=config.http_max_connections_per_host,
        timeout_total=config.http_timeout_total_seconds,
        timeout_connect=config.http_timeout_connect_seconds,
        timeout_sock_read=config.http_timeout_sock_read_seconds,
    )


def build_assets_service(
    config: ClientConfig,
    registry: AppRegistry,
    session: aiohttp.ClientSession | None = None,
) -> PlatformAppAssetsService:
    """
    Build a PlatformAppAssetsService backed by the configured state file.

    The checksum table is loaded from ``config.state_path`` here, so an
    invalid state file fails at construction rather than on first use.
    """
    cache_store = AssetCacheStore(JsonStateStore(config.state_path))
    return PlatformAppAssetsService(
        registry=registry,
        cache_store=cache_store,
        user_data_dir=config.user_data_dir,
        media_apps_subpath=config.media_apps_subpath,
        session=session,
        chunk_size=config.download_chunk_size,
        checksum_algorithm=config.checksum_algorithm,
    )


__all__ = ["configure_logging", "build_session", "build_assets_service"]
