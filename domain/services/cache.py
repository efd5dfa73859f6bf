from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Hashable


class LookupCache:
    """
    Memoizes the results of external lookups for the lifetime of its owner.

    Concurrent callers asking for the same key share a single in-flight
    fetch. Failed fetches are not cached, so a later run can try again.
    """

    def __init__(self) -> None:
        self._values: dict[Hashable, Any] = {}
        self._pending: dict[Hashable, asyncio.Future[Any]] = {}

    async def get_or_fetch(
        self,
        key: Hashable,
        fetch: Callable[[], Awaitable[Any]],
    ) -> Any:
        if key in self._values:
            return self._values[key]

        pending = self._pending.get(key)
        if pending is None:
            pending = asyncio.ensure_future(fetch())
            self._pending[key] = pending
            pending.add_done_callback(lambda fut: self._settle(key, fut))

        # Cancelling one waiter must not cancel the fetch other waiters share.
        return await asyncio.shield(pending)

    def _settle(self, key: Hashable, fut: asyncio.Future[Any]) -> None:
        self._pending.pop(key, None)
        if not fut.cancelled() and fut.exception() is None:
            self._values[key] = fut.result()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def clear(self) -> None:
        self._values.clear()
        self._pending.clear()
