"""
Retry-once-on-unauthorized middleware.

Wraps an authenticated async operation. When the operation fails with an
unauthorized (401) error, the caller-supplied refresh operation is awaited
once and the original operation is replayed once with the same arguments:

    Initial ──ok──> return value
       │
       └─401──> refresh() ──> replay ──ok──> return value
                                  └──error──> raise replay error
    Any other error on the first attempt is raised unchanged.

There is no loop and no backoff. A second 401 after the replay is final.
The wrapped operation will run twice after a refresh, so it must be safe to
repeat (state-changing writes are replayed verbatim).
"""

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from types import MethodType
from typing import Any, TypeVar

from clientcore.errors.exceptions import is_auth_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[..., Awaitable[T]]
RefreshOperation = Callable[[], Awaitable[Any]]
UnauthorizedPredicate = Callable[[BaseException], bool]


def is_unauthorized(error: BaseException) -> bool:
    """Default predicate: the error carries HTTP status 401."""
    return is_auth_error(error)


async def call_with_token_refresh(
    operation: Operation,
    refresh: RefreshOperation,
    *args: Any,
    is_unauthorized: UnauthorizedPredicate = is_unauthorized,
    **kwargs: Any,
) -> Any:
    """
    Invoke operation, refreshing the token and replaying once on 401.

    Args:
        operation: Async callable performing the authenticated request
        refresh: Async callable that obtains a fresh token
        *args: Positional arguments for operation (reused on replay)
        is_unauthorized: Predicate deciding whether an error warrants a refresh
        **kwargs: Keyword arguments for operation (reused on replay)

    Returns:
        Result of the first successful invocation

    Raises:
        The first attempt's error when it is not unauthorized, the refresh
        error when refreshing fails, or the replay's error otherwise.
    """
    name = getattr(operation, "__name__", repr(operation))

    try:
        return await operation(*args, **kwargs)
    except Exception as e:
        if not is_unauthorized(e):
            raise
        logger.info(
            "Unauthorized response for %s, refreshing token",
            name,
            extra={"operation": name, "attempt": 1},
        )

    # Outside the except block so a replay failure is raised without the
    # first 401 chained onto it
    await refresh()

    try:
        return await operation(*args, **kwargs)
    except Exception as e:
        logger.warning(
            "Replay after token refresh failed for %s: %s",
            name,
            str(e)[:200],
            extra={"operation": name, "attempt": 2, "error_type": type(e).__name__},
        )
        raise


def with_token_refresh(
    operation: Operation,
    refresh: RefreshOperation,
    is_unauthorized: UnauthorizedPredicate = is_unauthorized,
) -> Operation:
    """
    Wrap operation so every call gets one refresh-and-replay on 401.

    Usage:
        fetch_channel = with_token_refresh(client.fetch_raw_channel_info, auth.refresh_token)
        info = await fetch_channel()
    """

    @wraps(operation)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        return await call_with_token_refresh(
            operation, refresh, *args, is_unauthorized=is_unauthorized, **kwargs
        )

    return wrapper


def requires_token(
    refresh_method: str = "fetch_new_token",
    is_unauthorized: UnauthorizedPredicate = is_unauthorized,
):
    """
    Method decorator applying the token-refresh middleware.

    The refresh operation is looked up on the instance at call time, so the
    decorated method and its refresh share the same ``self``.

    Usage:
        class TwitchClient(PlatformApiClient):
            @requires_token()
            async def fetch_raw_channel_info(self):
                ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            return await call_with_token_refresh(
                MethodType(func, self),
                getattr(self, refresh_method),
                *args,
                is_unauthorized=is_unauthorized,
                **kwargs,
            )

        return wrapper

    return decorator


__all__ = [
    "is_unauthorized",
    "call_with_token_refresh",
    "with_token_refresh",
    "requires_token",
]
