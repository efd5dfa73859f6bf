from __future__ import annotations

import asyncio
from typing import Awaitable, Hashable, Iterable, TypeVar

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


def split_csv(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def unique(items: Iterable[H]) -> list[H]:
    """Drop repeated items, keeping first-seen order."""
    return list(dict.fromkeys(items))


async def gather_or_cancel(aws: Iterable[Awaitable[T]]) -> list[T]:
    """
    Await all awaitables concurrently.

    On the first failure every sibling still running is cancelled and
    awaited before the error propagates, so nothing keeps running in the
    background once the caller sees the exception.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
