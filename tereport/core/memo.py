# ==============================================================================
# Memoization Cache
# ==============================================================================
"""
Per-build memoization for the async resolvers.

Each key maps to an asyncio future that is inserted *before* the fetch is
awaited. A second lookup for the same key (sequential or concurrent) awaits
that same future, so every key is fetched at most once per cache.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoCache(Generic[K, V]):
    """
    Key -> resolved value, with in-flight markers.

    Values may be None; a memoized None records a failed resolution so it is
    not retried within the same build.
    """

    def __init__(self) -> None:
        self._entries: dict[K, asyncio.Future] = {}

    def __contains__(self, key: K) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: K) -> Optional[V]:
        """
        Get a resolved value without fetching.

        Returns:
            The value, or None if the key is unknown, still in flight,
            or memoized as a failure
        """
        future = self._entries.get(key)
        if future is None or not future.done() or future.cancelled():
            return None
        if future.exception() is not None:
            return None
        return future.result()

    def set(self, key: K, value: Optional[V]) -> None:
        """Store an already-resolved value."""
        future = asyncio.get_running_loop().create_future()
        future.set_result(value)
        self._entries[key] = future

    async def get_or_fetch(self, key: K, fetch: Callable[[], Awaitable[Optional[V]]]) -> Optional[V]:
        """
        Return the memoized value for key, calling fetch only on first touch.

        If fetch raises, the key is forgotten and the exception propagates
        to the caller and to anyone already awaiting the same key.
        """
        future = self._entries.get(key)
        if future is not None:
            return await future

        future = asyncio.get_running_loop().create_future()
        self._entries[key] = future
        try:
            value = await fetch()
        except BaseException as exc:
            del self._entries[key]
            if isinstance(exc, asyncio.CancelledError):
                future.cancel()
            else:
                future.set_exception(exc)
                # Mark retrieved so an unawaited future does not log at GC.
                future.exception()
            raise
        future.set_result(value)
        return value

    def values(self) -> list[V]:
        """Resolved, non-None values in first-touch order."""
        resolved = []
        for future in self._entries.values():
            if not future.done() or future.cancelled() or future.exception() is not None:
                continue
            if future.result() is not None:
                resolved.append(future.result())
        return resolved
