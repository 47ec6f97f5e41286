# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
ManualTimerSource for Invocation Scheduler

A controllable fake clock. Time only moves when advance() or advance_to()
is called, and due timers fire synchronously inside that call in deadline
order. Perfect for deterministic tests of timing policies without real
waits.
"""

import heapq
import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from .base import BaseTimerSource

# Guard against a callback that keeps re-arming zero-delay timers
DEFAULT_MAX_FIRES = 100_000


@dataclass(eq=False)
class ManualTimerHandle:
    """A timer registered with a ManualTimerSource."""

    deadline: float
    on_fire: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class ManualTimerSource(BaseTimerSource):
    """
    Deterministic timer source driven explicitly by the caller.

    Timers live in a min-heap ordered by (deadline, registration order), so
    timers with equal deadlines fire in the order they were armed. The clock
    is moved to each timer's deadline before it fires, so ``now()`` inside a
    callback reports the deadline itself.

    Exceptions raised by a fire propagate out of advance()/advance_to(). The
    clock then stays at the failing timer's deadline and later timers remain
    queued.

    Example:
        >>> clock = ManualTimerSource()
        >>> scheduler = Scheduler(SchedulerConfig.debounce(1.0), seen.append,
        ...                       timer_source=clock)
        >>> scheduler.trigger("a")
        >>> clock.advance(1.0)
        1
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._heap: list[tuple[float, int, ManualTimerHandle]] = []
        self._counter = itertools.count()
        self._lock = threading.RLock()

    def now(self) -> float:
        with self._lock:
            return self._now

    def arm(self, delay: float, on_fire: Callable[[], None]) -> ManualTimerHandle:
        with self._lock:
            handle = ManualTimerHandle(
                deadline=self._now + max(0.0, delay), on_fire=on_fire
            )
            heapq.heappush(self._heap, (handle.deadline, next(self._counter), handle))
            return handle

    def disarm(self, handle: ManualTimerHandle) -> None:
        with self._lock:
            handle.cancelled = True

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def pending_timers(self) -> int:
        """Number of armed timers that have neither fired nor been disarmed."""
        with self._lock:
            return sum(1 for _, _, handle in self._heap if handle.active)

    @property
    def next_deadline(self) -> float | None:
        """Deadline of the earliest armed timer, or None when idle."""
        with self._lock:
            self._discard_inactive_unlocked()
            return self._heap[0][0] if self._heap else None

    # ------------------------------------------------------------------
    # Driving the clock
    # ------------------------------------------------------------------

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every timer that becomes due.

        Args:
            seconds: Non-negative amount of time to advance

        Returns:
            Number of timers fired
        """
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount: {seconds}")
        return self.advance_to(self.now() + seconds)

    def advance_to(self, target: float) -> int:
        """Move the clock to ``target`` firing due timers in deadline order."""
        fired = 0
        while True:
            handle = self._pop_due(target)
            if handle is None:
                break
            fired += 1
            if fired > DEFAULT_MAX_FIRES:
                raise RuntimeError(
                    f"more than {DEFAULT_MAX_FIRES} timers fired in one advance"
                )
            handle.on_fire()

        with self._lock:
            self._now = max(self._now, target)
        return fired

    def run_until_idle(self, max_fires: int = 1000) -> int:
        """
        Fire timers one by one, jumping the clock to each deadline, until
        none remain or ``max_fires`` timers have fired.

        Returns:
            Number of timers fired
        """
        fired = 0
        while fired < max_fires:
            deadline = self.next_deadline
            if deadline is None:
                break
            handle = self._pop_due(deadline)
            if handle is None:
                continue
            fired += 1
            handle.on_fire()
        return fired

    def _pop_due(self, target: float) -> ManualTimerHandle | None:
        with self._lock:
            self._discard_inactive_unlocked()
            if not self._heap or self._heap[0][0] > target:
                return None
            deadline, _, handle = heapq.heappop(self._heap)
            self._now = max(self._now, deadline)
            handle.fired = True
            return handle

    def _discard_inactive_unlocked(self) -> None:
        while self._heap and not self._heap[0][2].active:
            heapq.heappop(self._heap)


__all__ = ["ManualTimerHandle", "ManualTimerSource"]
