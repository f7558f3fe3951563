"""Content checksums computed by streaming a file through a hash."""

import asyncio
import hashlib
from pathlib import Path

DEFAULT_ALGORITHM = "md5"
READ_SIZE = 64 * 1024  # 64KB reads


async def get_checksum(
    file_path: str | Path,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = READ_SIZE,
) -> str:
    """
    Compute the hex digest of a file without loading it whole.

    Reads run in a worker thread so the event loop is never blocked.

    Args:
        file_path: File to hash
        algorithm: hashlib algorithm name (default: md5, 32 hex chars)
        chunk_size: Bytes per read

    Returns:
        Lowercase hexadecimal digest

    Raises:
        OSError: File cannot be opened or a read fails
    """
    hasher = hashlib.new(algorithm)

    f = await asyncio.to_thread(open, file_path, "rb")
    try:
        while True:
            data = await asyncio.to_thread(f.read, chunk_size)
            if not data:
                break
            hasher.update(data)
    finally:
        await asyncio.to_thread(f.close)

    return hasher.hexdigest()


__all__ = ["DEFAULT_ALGORITHM", "READ_SIZE", "get_checksum"]
