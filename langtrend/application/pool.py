from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Iterable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class BoundedPool:
    """
    Semaphore-gated task dispatcher.

    Every item gets its own task up front, but a task only calls `func`
    once it holds a semaphore slot, so no more than `limit` calls are ever
    in flight. Results come back in input order.

    All-or-nothing: the first exception cancels every task that is still
    pending or running and is re-raised to the caller.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    async def map(self, func: Callable[[T], Awaitable[R]], items: Iterable[T]) -> list[R]:
        semaphore = asyncio.Semaphore(self._limit)

        async def _run(item: T) -> R:
            async with semaphore:
                return await func(item)

        tasks = [asyncio.ensure_future(_run(item)) for item in items]
        if not tasks:
            return []

        log.debug("Dispatching %d tasks | limit=%d", len(tasks), self._limit)
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let cancelled tasks unwind before propagating
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
