"""Coalescing of concurrent operations on the same key.

Two open actions for the same change context would otherwise both miss the
lookup and race to create. The second caller awaits the first one's task.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class InFlightOperations:
    """Per-process map of key -> running task. Entries are removed when the task finishes."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    async def run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Run `factory()` unless a task for `key` is already running; share its result.

        Exceptions propagate to every waiter. A cancelled waiter does not
        cancel the shared task.
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.info("Joining in-flight operation for %s", key)
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug("In-flight operation for %s failed", key)
