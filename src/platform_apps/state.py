"""
Durable storage for the asset checksum table.

The whole table is one JSON object ``{app_id: {asset_name: checksum}}``.
Commits replace the file atomically, so a crash mid-write leaves the previous
snapshot in place.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from platform_apps.exceptions import StateLoadError

logger = logging.getLogger(__name__)

AssetChecksumTable = dict[str, dict[str, str]]

_TABLE_ADAPTER = TypeAdapter(AssetChecksumTable)


class StateStore(Protocol):
    """Persistence boundary for the checksum table."""

    def load(self) -> AssetChecksumTable: ...

    def commit(self, state: AssetChecksumTable) -> None: ...


class JsonStateStore:
    """Checksum table persisted as a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> AssetChecksumTable:
        """
        Read the last committed table.

        Returns an empty table when nothing was committed yet.

        Raises:
            StateLoadError: File content is not a valid checksum table
            OSError: File exists but cannot be read
        """
        if not self.path.exists():
            logger.debug(
                "No persisted asset state, starting empty",
                extra={"destination_path": str(self.path)},
            )
            return {}

        raw = self.path.read_bytes()
        try:
            return _TABLE_ADAPTER.validate_json(raw)
        except ValidationError as e:
            raise StateLoadError(
                f"Invalid asset state file: {self.path}",
                cause=e,
                context={"path": str(self.path)},
            ) from e

    def commit(self, state: AssetChecksumTable) -> None:
        """Atomically replace the persisted table with state."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _TABLE_ADAPTER.dump_json(state, indent=2)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["AssetChecksumTable", "StateStore", "JsonStateStore"]
