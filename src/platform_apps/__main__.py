"""Fetch or inspect platform app assets from the command line. Use --help for usage."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import aiohttp
from dotenv import load_dotenv

from clientcore.errors.exceptions import ClientError, classify_exception, is_retryable_error
from config.config import load_config
from platform_apps.factory import build_assets_service, build_session, configure_logging
from platform_apps.models import AppManifest, LoadedApp
from platform_apps.registry import PlatformAppsRegistry

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m platform_apps",
        description="Download platform app assets and inspect recorded checksums",
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")

    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Download an asset and record its checksum")
    fetch.add_argument("app_id")
    fetch.add_argument("asset_url", help="Absolute URL or path relative to the app URL")
    fetch.add_argument("--app-url", help="Base URL the app is served from")
    fetch.add_argument("--dev-port", type=int, help="Local dev server port (unpacked app)")

    lookup = subparsers.add_parser("lookup", help="Print the recorded checksum of an asset")
    lookup.add_argument("app_id")
    lookup.add_argument("asset_url")

    return parser.parse_args(argv)


def _registry_for(args: argparse.Namespace) -> PlatformAppsRegistry:
    """Registry holding the single app named on the command line."""
    app = LoadedApp(
        id=args.app_id,
        manifest=AppManifest(name=args.app_id, version="0.0.0"),
        unpacked=getattr(args, "dev_port", None) is not None,
        app_url=getattr(args, "app_url", None),
        dev_port=getattr(args, "dev_port", None),
    )
    return PlatformAppsRegistry([app])


async def _fetch(args: argparse.Namespace, config) -> Path:
    registry = _registry_for(args)
    session = build_session(config)
    try:
        service = build_assets_service(config, registry, session=session)
        return await service.add_platform_app_asset(args.app_id, args.asset_url)
    finally:
        await session.close()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    config = load_config(config_path=args.config)
    configure_logging(config)

    if args.command == "lookup":
        service = build_assets_service(config, _registry_for(args))
        checksum = service.get_asset(args.app_id, args.asset_url)
        if checksum is None:
            print(f"No checksum recorded for {args.asset_url!r}", file=sys.stderr)
            return 1
        print(checksum)
        return 0

    try:
        path = asyncio.run(_fetch(args, config))
    except (ClientError, aiohttp.ClientError, OSError) as e:
        logger.error(
            "Asset download failed",
            extra={
                "error_message": str(e),
                "error_category": classify_exception(e).value,
                "retryable": is_retryable_error(e),
            },
        )
        print(f"✗ {e}", file=sys.stderr)
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
