"""
Streaming download of binary assets.

The response body is consumed as a sequence of chunks and assembled in
memory; the destination file is only written once the stream has ended,
through a temporary sibling file that is renamed into place. A caller
awaiting download_file() never observes a partially written asset.
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiohttp

from clientcore.errors.exceptions import DownloadError
from clientcore.http.client import create_session, is_success

logger = logging.getLogger(__name__)

# Download configuration constants
CHUNK_SIZE = 64 * 1024  # 64KB chunks
PARTIAL_SUFFIX = ".part"


@dataclass
class StreamDownloadResponse:
    """
    Response from streaming HTTP download operation.

    Attributes:
        status_code: HTTP status code
        content_length: Size in bytes (from Content-Length header)
        content_type: MIME type (from Content-Type header)
        chunk_iterator: Async iterator yielding byte chunks in arrival order.
            Can be consumed once; closes the response when exhausted or closed.
    """

    status_code: int
    content_length: Optional[int]
    content_type: Optional[str]
    chunk_iterator: "ResponseChunkIterator"


class ResponseChunkIterator:
    """
    Async iterator over response chunks that releases the response exactly once.

    The response is released when the chunks are exhausted, when reading a
    chunk fails, or on ``aclose()``, including an ``aclose()`` before the
    first chunk was requested.
    """

    def __init__(self, response_ctx, response: aiohttp.ClientResponse, chunk_size: int):
        self._response_ctx = response_ctx
        self._chunks = response.content.iter_chunked(chunk_size).__aiter__()
        self._released = False

    def __aiter__(self) -> "ResponseChunkIterator":
        return self

    async def __anext__(self) -> bytes:
        if self._released:
            raise StopAsyncIteration
        try:
            return await self._chunks.__anext__()
        except BaseException:
            # End of stream or read failure
            await self.aclose()
            raise

    async def aclose(self) -> None:
        if self._released:
            return
        self._released = True
        await self._response_ctx.__aexit__(None, None, None)


async def stream_download_url(
    url: str,
    session: aiohttp.ClientSession,
    chunk_size: int = CHUNK_SIZE,
    allow_redirects: bool = True,
) -> StreamDownloadResponse:
    """
    Open a streaming GET request for url.

    The returned iterator MUST be consumed (or closed with ``aclose()``) so the
    underlying connection is released.

    Args:
        url: URL to download
        session: aiohttp ClientSession (caller manages lifecycle)
        chunk_size: Size of chunks in bytes (default: 64KB)
        allow_redirects: Whether to follow redirects (default: True for CDN URLs)

    Returns:
        StreamDownloadResponse with a lazy chunk iterator

    Raises:
        DownloadError: Server answered with a non-2xx status
        aiohttp.ClientError: Connection failed before a response arrived

    Example:
        response = await stream_download_url("https://cdn.example.com/a.mp4", session)
        async for chunk in response.chunk_iterator:
            buffer.extend(chunk)
    """
    response_ctx = session.get(url, allow_redirects=allow_redirects)
    response = await response_ctx.__aenter__()

    if not is_success(response.status):
        await response_ctx.__aexit__(None, None, None)
        raise DownloadError(status_code=response.status, url=url)

    return StreamDownloadResponse(
        status_code=response.status,
        content_length=response.content_length,
        content_type=response.headers.get("Content-Type"),
        chunk_iterator=ResponseChunkIterator(response_ctx, response, chunk_size),
    )


def _write_atomic(destination: Path, content: bytes) -> None:
    """Write content next to destination, then rename it into place."""
    partial_path = destination.with_name(destination.name + PARTIAL_SUFFIX)
    try:
        with open(partial_path, "wb") as f:
            f.write(content)
        os.replace(partial_path, destination)
    except OSError:
        partial_path.unlink(missing_ok=True)
        raise


async def download_file(
    url: str,
    dst_path: str | Path,
    session: aiohttp.ClientSession | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> None:
    """
    Download url and write the complete body to dst_path.

    Nothing is written when the server refuses the request or the stream
    fails part way; an existing file at dst_path is left untouched in both
    cases.

    Args:
        url: Source URL
        dst_path: Destination file path (parent directory must exist)
        session: aiohttp ClientSession; a temporary one is created if omitted
        chunk_size: Size of chunks in bytes

    Raises:
        DownloadError: Non-2xx status
        aiohttp.ClientError: Connection or mid-stream failure
        OSError: Destination not writable
    """
    destination = Path(dst_path)
    owns_session = session is None
    if session is None:
        session = create_session()

    start = time.perf_counter()
    try:
        response = await stream_download_url(url, session, chunk_size=chunk_size)

        buffer = bytearray()
        chunk_iterator = response.chunk_iterator
        try:
            async for chunk in chunk_iterator:
                buffer.extend(chunk)
        finally:
            # Release the connection even when iteration is interrupted
            await chunk_iterator.aclose()

        await asyncio.to_thread(_write_atomic, destination, bytes(buffer))
    finally:
        if owns_session:
            await session.close()
            await asyncio.sleep(0)

    logger.debug(
        "Download completed",
        extra={
            "download_url": url,
            "destination_path": str(destination),
            "bytes_downloaded": len(buffer),
            "content_type": response.content_type,
            "duration_ms": round((time.perf_counter() - start) * 1000, 1),
        },
    )


__all__ = [
    "CHUNK_SIZE",
    "StreamDownloadResponse",
    "ResponseChunkIterator",
    "stream_download_url",
    "download_file",
]
