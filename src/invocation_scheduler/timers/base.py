# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base Timer Source for Invocation Scheduler

This module provides the BaseTimerSource abstract class: the clock and
one-shot timer capability a Scheduler is driven by. Keeping it injectable
means the scheduler core has no direct dependency on threads, event loops
or wall-clock time.
"""

import abc
from collections.abc import Callable
from typing import Any

# Opaque timer registration returned by arm(); only the issuing source
# knows how to interpret it.
TimerHandle = Any


class BaseTimerSource(abc.ABC):
    """
    Abstract clock + one-shot timer primitive.

    A single timer source may be shared by any number of schedulers.
    Implementations must allow arm() and disarm() to be called from
    multiple schedulers without cross-instance interference.

    Contract:
        - now() is monotonic and expressed in seconds.
        - arm(delay, on_fire) schedules on_fire() to run once, no earlier
          than delay seconds from now, and returns a handle.
        - disarm(handle) prevents a not-yet-run on_fire from running.
          Disarming an already fired or already disarmed handle is a no-op.
        - A fire that was already in progress when disarm() was called may
          still run; the scheduler guards against that itself.
    """

    @abc.abstractmethod
    def now(self) -> float:
        """Return the current monotonic time in seconds."""
        pass

    @abc.abstractmethod
    def arm(self, delay: float, on_fire: Callable[[], None]) -> TimerHandle:
        """
        Schedule a one-shot callback.

        Args:
            delay: Seconds to wait (negative values are treated as zero)
            on_fire: Zero-argument callable run when the timer expires

        Returns:
            An opaque handle accepted by disarm()
        """
        pass

    @abc.abstractmethod
    def disarm(self, handle: TimerHandle) -> None:
        """Cancel a timer previously returned by arm()."""
        pass


__all__ = ["BaseTimerSource", "TimerHandle"]
