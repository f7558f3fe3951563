"""
Asset cache store.

Tracks the checksum of every downloaded asset, per app. The table is only
changed through record(), which commits the new table to durable storage
before making it visible to readers.
"""

import copy
import logging
import threading

from platform_apps.state import AssetChecksumTable, StateStore

logger = logging.getLogger(__name__)


class AssetCacheStore:
    """
    Checksum table for downloaded app assets.

    Reads never fail: an unknown app or asset simply has no checksum.
    Checksums are stored as computed and are not re-validated against the
    file on read.

    Usage:
        store = AssetCacheStore(JsonStateStore(user_data / "platform-app-assets.json"))
        store.record("app-1", "transition.mp4", "9e107d9d372bb6826bd81d3542a419d6")
        store.lookup("app-1", "transition.mp4")
    """

    def __init__(self, state_store: StateStore):
        self._state_store = state_store
        self._lock = threading.Lock()
        self._table: AssetChecksumTable = state_store.load()

        logger.debug(
            "Asset cache store initialized",
            extra={"operation": "load_state"},
        )

    def lookup(self, app_id: str, asset_name: str) -> str | None:
        """Return the recorded checksum, or None."""
        return self._table.get(app_id, {}).get(asset_name)

    def has(self, app_id: str, asset_name: str) -> bool:
        return self.lookup(app_id, asset_name) is not None

    def record(self, app_id: str, asset_name: str, checksum: str) -> None:
        """
        Set the checksum for one asset, overwriting any previous value.

        The updated table is committed first and only then swapped in, so if
        the commit raises, readers keep seeing the previous table.
        """
        with self._lock:
            updated = {key: dict(assets) for key, assets in self._table.items()}
            updated.setdefault(app_id, {})[asset_name] = checksum

            self._state_store.commit(updated)
            self._table = updated

        logger.debug(
            "Recorded asset checksum",
            extra={"app_id": app_id, "asset": asset_name, "checksum": checksum},
        )

    def snapshot(self) -> AssetChecksumTable:
        return copy.deepcopy(self._table)


__all__ = ["AssetCacheStore"]
