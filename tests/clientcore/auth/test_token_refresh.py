"""
Tests for the retry-once-on-unauthorized middleware.
"""

import logging
from unittest.mock import AsyncMock

import pytest

from clientcore.auth import (
    call_with_token_refresh,
    is_unauthorized,
    requires_token,
    with_token_refresh,
)
from clientcore.errors import HttpResponseError


class Unauthorized(Exception):
    status = 401


class TestCallWithTokenRefresh:
    @pytest.mark.asyncio
    async def test_success_does_not_refresh(self):
        operation = AsyncMock(return_value="ok")
        refresh = AsyncMock()

        result = await call_with_token_refresh(operation, refresh, "a", key="b")

        assert result == "ok"
        operation.assert_awaited_once_with("a", key="b")
        refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unauthorized_then_success_refreshes_once(self):
        operation = AsyncMock(side_effect=[HttpResponseError(401), "Y"])
        refresh = AsyncMock()

        result = await call_with_token_refresh(operation, refresh, "channel", limit=5)

        assert result == "Y"
        assert operation.await_count == 2
        assert refresh.await_count == 1
        # Replay uses the original arguments
        assert operation.await_args_list[0] == operation.await_args_list[1]

    @pytest.mark.asyncio
    async def test_second_unauthorized_is_final(self):
        second = HttpResponseError(401, body={"message": "still expired"})
        operation = AsyncMock(side_effect=[HttpResponseError(401), second])
        refresh = AsyncMock()

        with pytest.raises(HttpResponseError) as exc_info:
            await call_with_token_refresh(operation, refresh)

        assert exc_info.value is second
        assert operation.await_count == 2
        assert refresh.await_count == 1

    @pytest.mark.asyncio
    async def test_non_auth_error_is_not_retried(self):
        error = HttpResponseError(500, body={"message": "oops"})
        operation = AsyncMock(side_effect=error)
        refresh = AsyncMock()

        with pytest.raises(HttpResponseError) as exc_info:
            await call_with_token_refresh(operation, refresh)

        assert exc_info.value is error
        assert operation.await_count == 1
        refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refresh_failure_suppresses_replay(self):
        operation = AsyncMock(side_effect=[HttpResponseError(401), "unused"])
        refresh = AsyncMock(side_effect=ConnectionError("refresh endpoint down"))

        with pytest.raises(ConnectionError):
            await call_with_token_refresh(operation, refresh)

        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_status_attribute_is_recognized(self):
        operation = AsyncMock(side_effect=[Unauthorized(), 42])
        refresh = AsyncMock()

        assert await call_with_token_refresh(operation, refresh) == 42

    @pytest.mark.asyncio
    async def test_custom_predicate(self):
        class Expired(Exception):
            pass

        operation = AsyncMock(side_effect=[Expired(), "fresh"])
        refresh = AsyncMock()

        result = await call_with_token_refresh(
            operation, refresh, is_unauthorized=lambda e: isinstance(e, Expired)
        )

        assert result == "fresh"
        refresh.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_logs_refresh_and_failed_replay(self, caplog):
        operation = AsyncMock(side_effect=[HttpResponseError(401), HttpResponseError(401)])
        operation.__name__ = "fetch_channel"

        with caplog.at_level(logging.INFO, logger="clientcore.auth.token_refresh"):
            with pytest.raises(HttpResponseError):
                await call_with_token_refresh(operation, AsyncMock())

        levels = [record.levelno for record in caplog.records]
        assert levels == [logging.INFO, logging.WARNING]


class TestWithTokenRefresh:
    @pytest.mark.asyncio
    async def test_wrapper_forwards_arguments(self):
        calls = []

        async def fetch(channel_id, *, verbose=False):
            calls.append((channel_id, verbose))
            if len(calls) == 1:
                raise HttpResponseError(401)
            return {"id": channel_id}

        refresh = AsyncMock()
        wrapped = with_token_refresh(fetch, refresh)

        assert wrapped.__name__ == "fetch"
        assert await wrapped("123", verbose=True) == {"id": "123"}
        assert calls == [("123", True), ("123", True)]
        refresh.assert_awaited_once()


class TestRequiresToken:
    @pytest.mark.asyncio
    async def test_refresh_bound_to_same_instance(self):
        class Service:
            def __init__(self):
                self.token = "old"
                self.seen_tokens = []

            async def fetch_new_token(self):
                self.token = "new"

            @requires_token()
            async def fetch_info(self, suffix):
                self.seen_tokens.append(self.token)
                if self.token == "old":
                    raise HttpResponseError(401)
                return f"{self.token}-{suffix}"

        service = Service()
        assert await service.fetch_info("x") == "new-x"
        assert service.seen_tokens == ["old", "new"]

    @pytest.mark.asyncio
    async def test_custom_refresh_method_name(self):
        class Service:
            refreshed = 0

            async def renew(self):
                self.refreshed += 1

            @requires_token(refresh_method="renew")
            async def op(self):
                if not self.refreshed:
                    raise HttpResponseError(401)
                return "done"

        service = Service()
        assert await service.op() == "done"
        assert service.refreshed == 1


class TestIsUnauthorized:
    def test_401_only(self):
        assert is_unauthorized(HttpResponseError(401))
        assert not is_unauthorized(HttpResponseError(403))
        assert not is_unauthorized(ValueError("x"))
