"""Supervised background tasks."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Optional, Set

from cqreport.utils.logging import get_logger


class TaskSupervisor:
    """Owns fire-and-forget tasks and logs whatever they fail with.

    A failing task never cancels its siblings; the exception is logged and
    discarded once the task finishes. Tasks spawned with ``background=True``
    (long-running loops) are supervised the same way but never drained.
    """

    def __init__(self, name: str = "reporter") -> None:
        self._name = name
        self._tasks: Set[asyncio.Task[Any]] = set()
        self._background: Set[asyncio.Task[Any]] = set()
        self.logger = get_logger("cqreport.TaskSupervisor")

    def spawn(
        self,
        coro: Coroutine[Any, Any, Any],
        *,
        name: Optional[str] = None,
        background: bool = False,
    ) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=f"{self._name}-{name}" if name else None)
        (self._background if background else self._tasks).add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.error("Unhandled exception in task %s: %s", task.get_name(), exc, exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for running foreground tasks, including ones spawned meanwhile.

        Returns False when ``timeout`` expired first.
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while self._tasks:
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                return False
            await asyncio.wait(set(self._tasks), timeout=remaining)
        return True
