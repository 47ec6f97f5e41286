# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Interval policy: invoke every ``delay`` seconds once started.
"""

import logging

from ..observability.constants import EDGE_FLUSH, EDGE_INTERVAL, EDGE_LEADING
from ..types.call import EMPTY_CALL, PendingCall
from .base import RunPolicy

logger = logging.getLogger(__name__)


class IntervalPolicy(RunPolicy):
    """
    Policy for SchedulerMode.INTERVAL.

    State machine: Stopped -> Running <-> Paused -> Stopped.

    The first trigger starts the run; later triggers only replace the
    arguments delivered on each tick. Pausing records the time left until
    the next tick and disarms the timer; resuming re-arms it with that
    remainder.
    """

    def on_trigger(self, call: PendingCall) -> None:
        state = self.state
        state.pending = call
        if state.running:
            return

        state.running = True
        state.paused = False
        state.remaining = None
        self.scheduler.arm_timer(self.config.delay)
        logger.debug(f"Interval '{self.config.name}' started")

        if self.config.leading:
            state.last_invoke = call.triggered_at
            self.scheduler.deliver(call, EDGE_LEADING)

    def on_fire(self) -> None:
        self._tick(EDGE_INTERVAL)

    def on_flush(self) -> None:
        state = self.state
        if state.paused:
            # Period restarts when the run resumes
            state.remaining = self.config.delay
            state.last_invoke = self.scheduler.now()
            self.scheduler.deliver(state.pending or EMPTY_CALL, EDGE_FLUSH)
            return
        self._tick(EDGE_FLUSH)

    def _tick(self, edge: str) -> None:
        state = self.state
        self.scheduler.arm_timer(self.config.delay)
        state.last_invoke = self.scheduler.now()
        self.scheduler.deliver(state.pending or EMPTY_CALL, edge)

    def on_cancel(self) -> bool:
        state = self.state
        was_running = state.running
        self.scheduler.disarm_timer()
        state.running = False
        state.paused = False
        state.remaining = None
        state.pending = None
        if was_running:
            logger.debug(f"Interval '{self.config.name}' stopped")
        return was_running

    def _pause(self) -> None:
        state = self.state
        due_at = state.due_at if state.due_at is not None else self.scheduler.now()
        state.remaining = max(0.0, due_at - self.scheduler.now())
        self.scheduler.disarm_timer()
        logger.debug(
            f"Interval '{self.config.name}' paused with {state.remaining:.3f}s left"
        )

    def _resume(self) -> None:
        state = self.state
        remaining = state.remaining if state.remaining is not None else self.config.delay
        state.remaining = None
        self.scheduler.arm_timer(remaining)
        logger.debug(f"Interval '{self.config.name}' resumed")

    def remaining(self) -> float | None:
        state = self.state
        if not state.running:
            return None
        if state.paused:
            return state.remaining
        if state.due_at is None:
            return None
        return max(0.0, state.due_at - self.scheduler.now())


__all__ = ["IntervalPolicy"]
