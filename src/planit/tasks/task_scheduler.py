# src/planit/tasks/task_scheduler.py

from __future__ import annotations

"""
Countdown ticker.

A small cooperative loop that:
- recomputes the display rows for the rendered task list,
- hands them to the front end,
- picks the next interval (fast while anything is urgent, slow otherwise),
- sleeps until the interval elapses or someone calls rearm().

Rendering belongs to the front end, not the ticker.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence

from .presenter import TaskRow, refresh_interval

logger = logging.getLogger(__name__)

RowsProvider = Callable[[], Sequence[TaskRow]]
RowsConsumer = Callable[[Sequence[TaskRow]], None]


class CountdownTicker:
    """
    Explicit handle around the countdown loop.

    - start()  -> spawn the loop on the running event loop
    - rearm()  -> recompute now (task list replaced, task completed, ...)
    - cancel() -> stop the loop (front end unmounted)
    """

    def __init__(
        self,
        recompute: RowsProvider,
        on_update: RowsConsumer,
        *,
        urgent_interval: float = 1.0,
        idle_interval: float = 60.0,
    ) -> None:
        self._recompute = recompute
        self._on_update = on_update
        self._urgent_interval = max(0.01, float(urgent_interval))
        self._idle_interval = max(self._urgent_interval, float(idle_interval))
        self._wake = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.current_interval: float | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="countdown-ticker")
        return self._task

    def rearm(self) -> None:
        self._wake.set()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def stop(self) -> None:
        """Cancel and wait for the loop to finish."""
        task = self._task
        self.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _tick(self) -> float:
        try:
            rows = self._recompute()
        except Exception:
            logger.exception("countdown recompute failed")
            return self._idle_interval

        try:
            self._on_update(rows)
        except Exception:
            logger.exception("countdown update failed")

        interval = refresh_interval(
            rows,
            urgent_seconds=self._urgent_interval,
            idle_seconds=self._idle_interval,
        )
        if interval != self.current_interval:
            logger.debug("countdown interval -> %.2fs", interval)
        return interval

    async def run(self) -> None:
        """Loop until cancelled. To stop the ticker, cancel the task (or call cancel())."""
        while True:
            self._wake.clear()
            self.current_interval = self._tick()
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self.current_interval)
