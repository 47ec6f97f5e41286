# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
asyncio timer source.

Uses the event loop's clock and ``loop.call_later``. Fires run as plain
callbacks on the loop thread, so no extra threads are created.
"""

import asyncio
from collections.abc import Callable

from .base import BaseTimerSource


class AsyncioTimerSource(BaseTimerSource):
    """
    Timer source backed by an asyncio event loop.

    The loop is captured lazily from the running loop on first use unless
    one is passed explicitly. arm() and disarm() must be called from the
    loop's thread (asyncio.TimerHandle is not thread-safe).

    Exceptions raised by a fire are reported through the loop's exception
    handler (``loop.set_exception_handler``).

    Example:
        >>> async def main():
        ...     scheduler = Scheduler(
        ...         SchedulerConfig.throttle(0.1), redraw,
        ...         timer_source=AsyncioTimerSource(),
        ...     )
        ...     scheduler.trigger(event)
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The event loop timers are scheduled on.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def arm(self, delay: float, on_fire: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), on_fire)

    def disarm(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


__all__ = ["AsyncioTimerSource"]
