# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Mutable per-instance scheduler state.

A SchedulerState is owned by exactly one Scheduler and only ever touched
while that scheduler's lock is held. Mode policies read and write it
directly; nothing outside the scheduler package should.
"""

from dataclasses import dataclass
from typing import Any

from ..types.call import PendingCall


@dataclass
class SchedulerState:
    """
    Bookkeeping shared by all mode policies.

    Attributes:
        pending: Latest undelivered call (Debounce/Throttle) or the call
            delivered on every tick (Interval/Countdown)
        timer: Handle of the single live timer, if any
        due_at: Deadline of the live timer on the timer source's clock
        generation: Bumped on every arm/disarm; fires carrying an older
            generation are stale and ignored
        burst_start: Time the current burst (or throttle window) started
        deadline: Time the Debounce trailing edge is owed; triggers move it
            forward without re-arming, and the timer catches up when it fires
        last_invoke: Time of the most recent invocation
        running: An Interval/Countdown run is active (paused or not)
        paused: The active run is paused
        remaining: Interval time-to-next-tick frozen by pause(), or the last
            Countdown remaining value delivered to the callback
        active_elapsed: Countdown time elapsed while not paused, up to
            segment_start
        segment_start: Start of the current unpaused Countdown segment
        completed: The Countdown reached zero and completed
    """

    pending: PendingCall | None = None
    deadline: float | None = None
    timer: Any = None
    due_at: float | None = None
    generation: int = 0

    # Debounce / Throttle
    burst_start: float | None = None
    last_invoke: float | None = None

    # Interval / Countdown
    running: bool = False
    paused: bool = False
    remaining: float | None = None
    active_elapsed: float = 0.0
    segment_start: float | None = None
    completed: bool = False

    @property
    def has_timer(self) -> bool:
        return self.timer is not None


__all__ = ["SchedulerState"]
