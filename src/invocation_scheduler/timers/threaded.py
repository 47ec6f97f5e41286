# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Thread-based timer source.

Uses time.monotonic() as the clock and one threading.Timer per armed
timer. Fires run on the timer's own thread, so schedulers driven by this
source serialize their state with a lock.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from .base import BaseTimerSource

logger = logging.getLogger(__name__)


class ThreadingTimerSource(BaseTimerSource):
    """
    Timer source backed by threading.Timer.

    This is the default source for schedulers created without one. It
    suits synchronous programs and GUI/CLI tools where no event loop runs.

    Error Handling:
        A fire has no caller to return an exception to. If ``error_handler``
        is given, it receives any exception raised by a fire; otherwise the
        exception propagates out of the timer thread and is reported by
        ``threading.excepthook``.

    Example:
        >>> source = ThreadingTimerSource(error_handler=lambda e: log.error(e))
        >>> scheduler = Scheduler(SchedulerConfig.debounce(0.3), search,
        ...                       timer_source=source)
    """

    def __init__(
        self,
        error_handler: Callable[[BaseException], None] | None = None,
        daemon: bool = True,
    ) -> None:
        """
        Initialize the timer source.

        Args:
            error_handler: Receives exceptions raised by fires
            daemon: Run timer threads as daemons so they never block exit
        """
        self._error_handler = error_handler
        self._daemon = daemon

    def now(self) -> float:
        return time.monotonic()

    def arm(self, delay: float, on_fire: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay), self._run, args=(on_fire,))
        timer.daemon = self._daemon
        timer.start()
        return timer

    def disarm(self, handle: threading.Timer) -> None:
        handle.cancel()

    def _run(self, on_fire: Callable[[], None]) -> None:
        try:
            on_fire()
        except Exception as e:
            if self._error_handler is None:
                raise
            logger.debug(f"Timer fire raised {e!r}; passing to error handler")
            self._error_handler(e)


_default_source: ThreadingTimerSource | None = None
_default_lock = threading.Lock()


def get_default_timer_source() -> ThreadingTimerSource:
    """Return the process-wide ThreadingTimerSource shared by default."""
    global _default_source

    if _default_source is None:
        with _default_lock:
            if _default_source is None:
                _default_source = ThreadingTimerSource()

    return _default_source


__all__ = ["ThreadingTimerSource", "get_default_timer_source"]
