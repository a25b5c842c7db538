"""
Background task runner for fire-and-forget work.

Redirects spawn their durable hit increment here and return right away.
The runner keeps a reference to every pending task (asyncio only keeps
weak ones), logs failures, and can be drained on shutdown so pending
increments are not lost when the process stops.
"""

import asyncio
import logging
from typing import Coroutine, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine, name: Optional[str] = None) -> asyncio.Task:
        """Schedule a coroutine without awaiting it. Must be called from a running loop."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background task %s was cancelled", task.get_name())
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Background task %s failed: %s", task.get_name(), error,
                exc_info=(type(error), error, error.__traceback__),
            )

    async def drain(self, timeout: Optional[float] = None) -> int:
        """
        Wait for pending tasks.

        Args:
            timeout: Seconds to wait at most (None waits forever)

        Returns:
            Number of tasks still pending afterwards
        """
        if self._tasks:
            await asyncio.wait(set(self._tasks), timeout=timeout)
        if self._tasks:
            logger.warning("%d background tasks still pending after drain", len(self._tasks))
        return len(self._tasks)
