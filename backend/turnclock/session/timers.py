"""
Asyncio timer resources that drive a turn clock.

Two independent resources: a repeating one-second tick task, and one-shot
delayed callbacks used for the advance cooldown. Keeping them apart means
pausing or resetting the countdown (which cancels the tick task) never
delays or drops a pending cooldown unlock.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

TICK_INTERVAL_SECONDS = 1.0


class TickTimer:
    """Call ``on_tick`` once per interval until cancelled."""

    def __init__(self, on_tick: Callable[[], None], interval: float = TICK_INTERVAL_SECONDS) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._active_task: asyncio.Task[None] | None = None

    @property
    def is_active(self) -> bool:
        return self._active_task is not None and not self._active_task.done()

    def start(self) -> None:
        """Start ticking from a fresh interval, replacing any running loop."""
        self.cancel()
        self._active_task = asyncio.create_task(self._run())

    def cancel(self) -> None:
        if self._active_task is not None and not self._active_task.done():
            self._active_task.cancel()
        self._active_task = None

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                try:
                    self._on_tick()
                except Exception:
                    logger.exception("tick callback failed")
        except asyncio.CancelledError:
            pass


class CooldownScheduler:
    """Run one-shot callbacks after a delay on the running event loop."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.Task[None]:
        task = asyncio.create_task(self._run_later(delay, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    async def _run_later(self, delay: float, callback: Callable[[], None]) -> None:
        try:
            await asyncio.sleep(delay)
            callback()
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("cooldown callback failed")
