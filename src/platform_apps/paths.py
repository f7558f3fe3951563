"""Filesystem layout of downloaded app assets."""

from collections.abc import Sequence
from pathlib import Path
from urllib.parse import unquote, urlsplit

DEFAULT_MEDIA_APPS_SUBPATH: tuple[str, ...] = ("Media", "Apps")

_RESERVED_NAMES = frozenset({"", ".", ".."})
_FORBIDDEN_CHARS = ("/", "\\", "\x00")


def get_app_assets_dir(
    user_data_dir: str | Path,
    app_id: str,
    subpath: Sequence[str] = DEFAULT_MEDIA_APPS_SUBPATH,
) -> Path:
    """Return ``<user_data_dir>/Media/Apps/<app_id>`` (no filesystem access)."""
    return Path(user_data_dir).joinpath(*subpath, app_id)


def asset_filename_from_url(url: str) -> str:
    """
    Final path segment of url, percent-decoded.

    Query string and fragment are ignored, so
    ``https://cdn.example.com/a/transition.mp4?v=2`` gives ``transition.mp4``.
    Returns an empty string when the path ends in a slash. The result is not
    checked; pass it through is_valid_asset_filename() before using it as a
    path component.
    """
    path = unquote(urlsplit(url).path)
    return path.rsplit("/", 1)[-1]


def is_valid_asset_filename(name: str) -> bool:
    """
    True if name is a single plain file name.

    Rejects empty and dot names and anything containing a path separator
    (either slash) or NUL, so joining it onto the app directory can never
    leave that directory on any platform.
    """
    if name in _RESERVED_NAMES:
        return False
    return not any(char in name for char in _FORBIDDEN_CHARS)


__all__ = [
    "DEFAULT_MEDIA_APPS_SUBPATH",
    "get_app_assets_dir",
    "asset_filename_from_url",
    "is_valid_asset_filename",
]
