"""Detached asyncio work that must never fail the request that started it."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Coroutine

logger = logging.getLogger(__name__)

MAX_RECORDED_FAILURES = 100


@dataclass(frozen=True)
class BackgroundFailure:
    """One failed background task: its name and the exception it raised."""

    name: str
    error: BaseException


class BackgroundTaskRunner:
    """
    Schedules fire-and-forget coroutines on the running loop.

    References to pending tasks are held until they finish so they are not
    garbage collected mid-flight. Failures are logged, counted in
    ``failure_count`` and the most recent ones kept on ``errors``; they never
    propagate to the caller of ``submit``.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self.errors: deque[BackgroundFailure] = deque(maxlen=MAX_RECORDED_FAILURES)
        self.failure_count = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, name: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Schedule ``coro`` and return its task."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed: %s",
                task.get_name(),
                exc,
                exc_info=exc,
            )
            self.failure_count += 1
            self.errors.append(BackgroundFailure(name=task.get_name(), error=exc))

    async def drain(self) -> None:
        """Wait until every submitted task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
