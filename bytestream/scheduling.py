"""Detached task scheduling for bytestream.

This module provides the default IScheduler, running detached coroutines as
asyncio tasks on the running event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

from bytestream.interfaces import IScheduler

logger = logging.getLogger(__name__)


class TaskScheduler(IScheduler):
    """Runs detached coroutines as tasks on the running event loop.

    The event loop only keeps weak references to tasks, so the scheduler holds
    a strong reference to each task until it finishes.

    Attributes:
        _tasks: Tasks that have been scheduled and have not finished yet.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that have not finished yet."""
        return len(self._tasks)

    def schedule(self, coroutine: Coroutine[Any, Any, None]) -> bool:
        """Run a coroutine as a task on the running event loop.

        Args:
            coroutine: The work to run.

        Returns:
            True if a task was created, False if no event loop is running.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, dropping detached task %s", coroutine)
            coroutine.close()
            return False

        task = loop.create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def join(self) -> None:
        """Wait until every scheduled task, including ones scheduled meanwhile, finished."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


default_scheduler = TaskScheduler()
