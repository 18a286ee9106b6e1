"""Async helpers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

T = TypeVar("T")
R = TypeVar("R")


async def run_bounded(
    items: Sequence[T],
    limit: int,
    worker: Callable[[T, int], Awaitable[R]],
) -> list[R]:
    """Run ``worker(item, index)`` over ``items`` with at most ``limit`` in flight.

    Workers share a single cursor and each claims the next unclaimed index, so
    results land at their input position regardless of completion order. A
    failing worker is not caught here: the first exception cancels the other
    workers and propagates to the caller.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    total = len(items)
    if total == 0:
        return []

    results: list[R | None] = [None] * total
    cursor = 0

    async def drain() -> None:
        nonlocal cursor
        while cursor < total:
            index = cursor
            cursor += 1
            results[index] = await worker(items[index], index)

    tasks = [asyncio.create_task(drain()) for _ in range(min(limit, total))]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    return results  # type: ignore[return-value]
