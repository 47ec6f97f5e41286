# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Countdown policy.

Counts down ``delay`` seconds, calling the callback with the time left on
every tick, and completes exactly once when the time runs out.
"""

import logging

from ..observability.constants import EDGE_COMPLETE, EDGE_FLUSH, EDGE_TICK
from ..types.call import EMPTY_CALL, PendingCall
from .base import CLOCK_TOLERANCE, RunPolicy

logger = logging.getLogger(__name__)


class CountdownPolicy(RunPolicy):
    """
    Policy for SchedulerMode.COUNTDOWN.

    State machine: Stopped -> Running <-> Paused -> Completed / Stopped.

    A re-check timer fires every ``tick_interval`` seconds, shortened so the
    last re-check lands on the deadline. Only time spent running counts
    towards the duration: pausing folds the current segment into
    ``active_elapsed`` and keeps the timer ticking without delivering
    anything, resuming starts a new segment.

    The callback is called as ``callback(remaining, *args, **kwargs)``.
    The final tick carries ``0.0`` and is followed by ``on_complete()``.
    """

    def on_trigger(self, call: PendingCall) -> None:
        state = self.state
        state.pending = call
        if state.running:
            return

        state.running = True
        state.paused = False
        state.completed = False
        state.active_elapsed = 0.0
        state.segment_start = call.triggered_at
        state.remaining = self.config.delay
        self.scheduler.arm_timer(min(self.config.tick_interval, self.config.delay))
        logger.debug(
            f"Countdown '{self.config.name}' started for {self.config.delay}s"
        )

        if self.config.leading:
            state.last_invoke = call.triggered_at
            self.scheduler.deliver(call, EDGE_TICK, self.config.delay)

    def on_fire(self) -> None:
        state = self.state
        if not state.running:
            return

        if state.paused:
            self.scheduler.arm_timer(self.config.tick_interval)
            return

        left = self._time_left(self.scheduler.now())
        if left <= CLOCK_TOLERANCE:
            self._complete(EDGE_COMPLETE)
            return

        self.scheduler.arm_timer(min(self.config.tick_interval, left))
        state.remaining = left
        state.last_invoke = self.scheduler.now()
        self.scheduler.deliver(state.pending or EMPTY_CALL, EDGE_TICK, left)

    def on_flush(self) -> None:
        self._complete(EDGE_FLUSH)

    def _complete(self, edge: str) -> None:
        state = self.state
        call = state.pending or EMPTY_CALL

        self.scheduler.disarm_timer()
        state.running = False
        state.paused = False
        state.completed = True
        state.remaining = 0.0
        state.active_elapsed = self.config.delay
        state.segment_start = None
        state.pending = None
        state.last_invoke = self.scheduler.now()
        logger.debug(f"Countdown '{self.config.name}' reached zero")

        self.scheduler.deliver(call, edge, 0.0)
        self.scheduler.notify_complete()

    def on_cancel(self) -> bool:
        state = self.state
        was_running = state.running
        self.scheduler.disarm_timer()
        state.running = False
        state.paused = False
        state.completed = False
        state.remaining = None
        state.active_elapsed = 0.0
        state.segment_start = None
        state.pending = None
        if was_running:
            logger.debug(f"Countdown '{self.config.name}' stopped")
        return was_running

    def _pause(self) -> None:
        state = self.state
        now = self.scheduler.now()
        if state.segment_start is not None:
            state.active_elapsed += now - state.segment_start
        state.segment_start = None
        state.remaining = max(0.0, self.config.delay - state.active_elapsed)
        logger.debug(
            f"Countdown '{self.config.name}' paused with {state.remaining:.3f}s left"
        )

    def _resume(self) -> None:
        state = self.state
        state.segment_start = self.scheduler.now()
        self.scheduler.arm_timer(
            min(self.config.tick_interval, self._time_left(state.segment_start))
        )
        logger.debug(f"Countdown '{self.config.name}' resumed")

    def _time_left(self, now: float) -> float:
        state = self.state
        elapsed = state.active_elapsed
        if state.segment_start is not None:
            elapsed += now - state.segment_start
        return max(0.0, self.config.delay - elapsed)

    def remaining(self) -> float | None:
        state = self.state
        if state.running:
            return self._time_left(self.scheduler.now())
        if state.completed:
            return 0.0
        return self.config.delay


__all__ = ["CountdownPolicy"]
