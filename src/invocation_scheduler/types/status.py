# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Status snapshot returned by Scheduler.status().
"""

from dataclasses import dataclass

from ..config import SchedulerMode


@dataclass(frozen=True)
class SchedulerStatus:
    """
    Read-only snapshot of a scheduler's state.

    Attributes:
        mode: Mode the scheduler runs in
        is_pending: An invocation is owed (Debounce/Throttle: a trailing call
            is waiting; Interval/Countdown: a run is active, paused or not)
        is_running: A burst is active (Debounce/Throttle) or a run is
            delivering ticks (Interval/Countdown, False while paused)
        is_paused: Interval/Countdown run is paused
        remaining: Seconds until the next tick (Interval) or until
            completion (Countdown); None for Debounce/Throttle
    """

    mode: SchedulerMode
    is_pending: bool = False
    is_running: bool = False
    is_paused: bool = False
    remaining: float | None = None


__all__ = ["SchedulerStatus"]
