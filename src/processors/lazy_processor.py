# -*- coding: utf-8 -*-
"""Deferred, request-coalescing execution of expensive text processing."""

import asyncio
import copy
import inspect
from typing import Any, Awaitable, Callable, Iterable, Literal

from src.utils.logger import get_logger

Priority = Literal["high", "normal", "low"]

# Advisory start delay per priority, in seconds
PRIORITY_DELAYS: dict[str, float] = {
    "high": 0.0,
    "normal": 0.001,
    "low": 0.01,
}


class LazyProcessor:
    """Runs producers at most once per key and shares their results.

    Completed results are kept until ``clear()``. Concurrent requests for a key
    that is still being computed await the same task. Failed producers are not
    remembered, so the next request retries. Every caller receives its own copy
    of the result.
    """

    def __init__(self, enabled: bool = True):
        """Initialize lazy processor.

        Args:
            enabled: When False, producers run immediately and results are not
                retained.
        """
        self.enabled = enabled
        self.logger = get_logger(__name__)
        self._results: dict[str, Any] = {}
        self._queue: dict[str, asyncio.Task] = {}

    async def process_lazy(
        self,
        key: str,
        producer: Callable[[], Any | Awaitable[Any]],
        priority: Priority = "normal",
    ) -> Any:
        """Get the result for ``key``, running ``producer`` if needed.

        Args:
            key: Identity of the computation.
            producer: Zero-argument callable, sync or async.
            priority: Scheduling hint; lower priorities start later.

        Returns:
            The producer's result.

        Raises:
            Exception: Whatever the producer raises, delivered to every waiter.
        """
        if not self.enabled:
            return await self._run(producer, 0.0)

        if key in self._results:
            return copy.deepcopy(self._results[key])

        task = self._queue.get(key)
        if task is None:
            delay = PRIORITY_DELAYS.get(priority, PRIORITY_DELAYS["normal"])
            self.logger.debug(f"Scheduling {key} with {priority} priority")
            task = asyncio.ensure_future(self._run(producer, delay))
            task.add_done_callback(lambda t, k=key: self._on_done(k, t))
            self._queue[key] = task

        # A cancelled waiter must not cancel the shared producer
        return copy.deepcopy(await asyncio.shield(task))

    @staticmethod
    async def _run(producer: Callable[[], Any], delay: float) -> Any:
        if delay > 0:
            await asyncio.sleep(delay)
        result = producer()
        if inspect.isawaitable(result):
            result = await result
        return result

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        tracked = self._queue.get(key) is task
        if tracked:
            del self._queue[key]
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            self.logger.warning(f"Lazy processing failed for {key}: {error}")
        elif tracked:
            self._results[key] = task.result()

    async def process_batch(
        self,
        items: Iterable[tuple[str, Callable[[], Any]] | tuple[str, Callable[[], Any], Priority]],
    ) -> list[Any]:
        """Process several keys concurrently.

        Args:
            items: ``(key, producer)`` or ``(key, producer, priority)`` tuples.

        Returns:
            Results in input order.
        """
        return list(await asyncio.gather(*(self.process_lazy(*item) for item in items)))

    def get_stats(self) -> dict[str, Any]:
        return {
            "queue_size": len(self._queue),
            "cache_size": len(self._results),
            "is_processing": len(self._queue) > 0,
        }

    def clear(self) -> None:
        """Forget completed results and in-flight bookkeeping.

        Running producers are left to finish; their results are discarded.
        """
        self._results.clear()
        self._queue.clear()
