"""Periodic heartbeat reporting."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from cqreport.core.settings import HeartbeatConfig
from cqreport.core.tasks import TaskSupervisor
from cqreport.utils.logging import get_logger


Beat = Callable[[], Awaitable[None]]


class HeartbeatLoop:
    """Runs ``beat`` every ``interval_millis`` until stopped.

    The interval is measured from the end of one beat to the start of the
    next. Stopping is observed while waiting; a beat already in flight is
    allowed to finish.
    """

    def __init__(self, config: HeartbeatConfig, beat: Beat, *, supervisor: TaskSupervisor) -> None:
        self.config = config
        self._beat = beat
        self._supervisor = supervisor
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()
        self.logger = get_logger("cqreport.HeartbeatLoop")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self.logger.info("Starting heartbeat every %d ms", self.config.interval_millis)
        self._stop_event.clear()
        self._task = self._supervisor.spawn(self._run(), name="heartbeat", background=True)

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task:
            await asyncio.wait({self._task})
            self._task = None

    async def _run(self) -> None:
        interval = self.config.interval_seconds
        while not self._stop_event.is_set():
            try:
                await self._beat()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self.logger.exception("Heartbeat failed: %s", exc)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
