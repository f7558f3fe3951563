"""
Tests for streaming download and whole-file writes.
"""

from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import aiohttp
import pytest

from clientcore.download import CHUNK_SIZE, download_file, stream_download_url
from clientcore.errors import DownloadError, ErrorCategory

URL = "https://cdn.example.com/assets/transition.mp4"


@pytest.fixture
def mock_session():
    """Create mock aiohttp ClientSession."""
    return Mock(spec=aiohttp.ClientSession)


def make_response(status=200, chunks=(), fail_after=None):
    """Mock response streaming chunks, optionally raising after fail_after chunks."""
    response = Mock()
    response.status = status
    response.content_length = sum(len(c) for c in chunks)
    response.headers = {"Content-Type": "video/mp4"}

    async def mock_iter_chunked(chunk_size):
        for i, chunk in enumerate(chunks):
            if fail_after is not None and i == fail_after:
                raise aiohttp.ClientPayloadError("Response payload is not completed")
            yield chunk

    response.content = Mock()
    response.content.iter_chunked = mock_iter_chunked
    return response


def attach(session, response):
    mock_ctx = AsyncMock()
    mock_ctx.__aenter__ = AsyncMock(return_value=response)
    mock_ctx.__aexit__ = AsyncMock(return_value=None)
    session.get = Mock(return_value=mock_ctx)
    return mock_ctx


class TestStreamDownloadUrl:
    @pytest.mark.asyncio
    async def test_yields_chunks_in_order(self, mock_session):
        chunks = [b"chunk1", b"chunk2", b"chunk3"]
        mock_ctx = attach(mock_session, make_response(chunks=chunks))

        result = await stream_download_url(URL, mock_session)

        assert result.status_code == 200
        assert result.content_type == "video/mp4"
        assert result.content_length == 18
        assert [chunk async for chunk in result.chunk_iterator] == chunks
        mock_ctx.__aexit__.assert_awaited_once()

        call_args = mock_session.get.call_args
        assert call_args[0][0] == URL
        assert call_args[1]["allow_redirects"] is True

    @pytest.mark.asyncio
    async def test_http_error_releases_response(self, mock_session):
        mock_ctx = attach(mock_session, make_response(status=404))

        with pytest.raises(DownloadError) as exc_info:
            await stream_download_url(URL, mock_session)

        assert exc_info.value.status_code == 404
        assert exc_info.value.category == ErrorCategory.PERMANENT
        mock_ctx.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_closing_iterator_early_releases_response(self, mock_session):
        mock_ctx = attach(mock_session, make_response(chunks=[b"a", b"b"]))

        result = await stream_download_url(URL, mock_session)
        iterator = result.chunk_iterator
        assert await iterator.__anext__() == b"a"
        await iterator.aclose()

        mock_ctx.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_closing_before_iterating_releases_response(self, mock_session):
        mock_ctx = attach(mock_session, make_response(chunks=[b"a", b"b"]))

        result = await stream_download_url(URL, mock_session)
        await result.chunk_iterator.aclose()
        await result.chunk_iterator.aclose()

        mock_ctx.__aexit__.assert_awaited_once()
        assert [chunk async for chunk in result.chunk_iterator] == []

    @pytest.mark.asyncio
    async def test_stream_fault_releases_response(self, mock_session):
        mock_ctx = attach(mock_session, make_response(chunks=[b"a", b"b"], fail_after=1))

        result = await stream_download_url(URL, mock_session)
        with pytest.raises(aiohttp.ClientPayloadError):
            async for _ in result.chunk_iterator:
                pass

        mock_ctx.__aexit__.assert_awaited_once()


class TestDownloadFile:
    @pytest.mark.asyncio
    async def test_writes_concatenated_chunks(self, mock_session, tmp_path):
        attach(mock_session, make_response(chunks=[b"abc", b"def", b"ghi"]))
        destination = tmp_path / "transition.mp4"

        result = await download_file(URL, destination, session=mock_session)

        assert result is None
        assert destination.read_bytes() == b"abcdefghi"
        assert list(tmp_path.iterdir()) == [destination]

    @pytest.mark.asyncio
    async def test_http_error_leaves_existing_file_untouched(self, mock_session, tmp_path):
        attach(mock_session, make_response(status=404))
        destination = tmp_path / "transition.mp4"
        destination.write_bytes(b"previous")

        with pytest.raises(DownloadError):
            await download_file(URL, destination, session=mock_session)

        assert destination.read_bytes() == b"previous"

    @pytest.mark.asyncio
    async def test_stream_fault_leaves_no_file(self, mock_session, tmp_path):
        attach(mock_session, make_response(chunks=[b"abc", b"def"], fail_after=1))
        destination = tmp_path / "transition.mp4"

        with pytest.raises(aiohttp.ClientPayloadError):
            await download_file(URL, destination, session=mock_session)

        assert not destination.exists()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unwritable_destination_raises_oserror(self, mock_session, tmp_path):
        attach(mock_session, make_response(chunks=[b"abc"]))
        destination = tmp_path / "missing-dir" / "transition.mp4"

        with pytest.raises(OSError):
            await download_file(URL, destination, session=mock_session)

    @pytest.mark.asyncio
    async def test_overwrites_existing_file(self, mock_session, tmp_path):
        attach(mock_session, make_response(chunks=[b"new"]))
        destination = tmp_path / "transition.mp4"
        destination.write_bytes(b"old content")

        await download_file(URL, destination, session=mock_session)

        assert destination.read_bytes() == b"new"

    @pytest.mark.asyncio
    async def test_temporary_session_is_closed(self, tmp_path):
        session = Mock(spec=aiohttp.ClientSession)
        session.close = AsyncMock()
        attach(session, make_response(chunks=[b"x"]))

        with patch("clientcore.download.streaming.create_session", return_value=session):
            await download_file(URL, tmp_path / "a.bin")

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_chunk_size_is_forwarded(self, mock_session, tmp_path):
        response = make_response(chunks=[b"x"])
        seen = []
        original = response.content.iter_chunked

        def recording_iter(chunk_size):
            seen.append(chunk_size)
            return original(chunk_size)

        response.content.iter_chunked = recording_iter
        attach(mock_session, response)

        await download_file(URL, tmp_path / "a.bin", session=mock_session, chunk_size=1024)

        assert seen == [1024]
        assert CHUNK_SIZE == 64 * 1024
