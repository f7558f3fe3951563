"""
Async asset download and checksum module.

Provides:
    - stream_download_url: open a response as a lazy chunk iterator
    - download_file: assemble the chunks and write the file once complete
    - get_checksum: streaming file digest (md5 by default)

Example usage:
    from clientcore.download import download_file, get_checksum

    await download_file("https://cdn.example.com/stinger.mp4", Path("stinger.mp4"))
    checksum = await get_checksum(Path("stinger.mp4"))
"""

from clientcore.download.checksum import DEFAULT_ALGORITHM, READ_SIZE, get_checksum
from clientcore.download.streaming import (
    CHUNK_SIZE,
    StreamDownloadResponse,
    download_file,
    stream_download_url,
)

__all__ = [
    # Streaming
    "stream_download_url",
    "download_file",
    "StreamDownloadResponse",
    "CHUNK_SIZE",
    # Checksum
    "get_checksum",
    "DEFAULT_ALGORITHM",
    "READ_SIZE",
]
