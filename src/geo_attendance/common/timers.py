from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Union[None, Awaitable[None]]]


class IntervalTask:
    """Repeating timer bound to the running event loop.

    The callback runs every `interval` seconds until `cancel()`. Errors in the
    callback are logged and do not stop the timer.
    """

    def __init__(self, interval: float, callback: TimerCallback, *, name: str = "interval"):
        self._interval = float(interval)
        self._callback = callback
        self._name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                result = self._callback()
                if asyncio.iscoroutine(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("timer %s callback failed", self._name)


def call_later(delay: float, callback: TimerCallback) -> asyncio.Task:
    """Run `callback` once after `delay` seconds; cancel the returned task to abort."""

    async def _delayed() -> None:
        await asyncio.sleep(delay)
        result = callback()
        if asyncio.iscoroutine(result):
            await result

    return asyncio.get_running_loop().create_task(_delayed())
