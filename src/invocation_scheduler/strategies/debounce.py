# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Debounce policy.

Every trigger restarts the quiet period. The callback runs on the leading
edge of a burst, on the trailing edge once no trigger has arrived for
``delay`` seconds, or at the latest ``max_wait`` seconds after the burst
started.
"""

import logging

from ..observability.constants import EDGE_FLUSH, EDGE_LEADING, EDGE_MAX_WAIT, EDGE_TRAILING
from ..types.call import PendingCall
from .base import CLOCK_TOLERANCE, BurstPolicy

logger = logging.getLogger(__name__)


class DebouncePolicy(BurstPolicy):
    """
    Policy for SchedulerMode.DEBOUNCE.

    State machine: Idle -> Burst -> Idle.

    With ``leading`` the first trigger of a burst is delivered immediately
    and only a later trigger in the same burst can produce a trailing
    invocation. The trailing deadline is capped at
    ``burst_start + max_wait``, so an undelivered call is never deferred
    beyond that bound.

    A trigger inside a burst only moves ``state.deadline`` forward. The
    live timer is not replaced; when it fires early it re-arms for the
    time still left, so a burst of N triggers costs a handful of timers
    instead of N.
    """

    def on_trigger(self, call: PendingCall) -> None:
        state = self.state
        now = call.triggered_at

        if state.burst_start is None:
            self._start_burst(call, now)
            return

        self.scheduler.store_pending(call)

        max_wait = self.config.max_wait
        if max_wait is not None and now - state.burst_start >= max_wait:
            burst_start = state.burst_start
            self.scheduler.disarm_timer()
            state.pending = None
            state.burst_start = None
            state.deadline = None
            logger.debug(
                f"Debounce '{self.config.name}' hit max_wait after {now - burst_start:.3f}s"
            )
            if self.config.trailing:
                state.last_invoke = now
                self.scheduler.deliver(call, EDGE_MAX_WAIT, since=burst_start)
            else:
                self._start_burst(call, now)
            return

        deadline = now + self.config.delay
        if max_wait is not None:
            deadline = min(deadline, state.burst_start + max_wait)
        state.deadline = deadline
        if state.due_at is None or deadline < state.due_at:
            self.scheduler.arm_timer(deadline - now)

    def on_fire(self) -> None:
        state = self.state
        now = self.scheduler.now()
        if state.deadline is not None and state.deadline - now > CLOCK_TOLERANCE:
            self.scheduler.arm_timer(state.deadline - now)
            return
        self._fire(flush=False)

    def _start_burst(self, call: PendingCall, now: float) -> None:
        state = self.state
        state.burst_start = now
        state.deadline = now + self.config.delay
        logger.debug(f"Debounce '{self.config.name}' burst started at {now}")

        self.scheduler.arm_timer(self.config.delay)
        if self.config.leading:
            state.last_invoke = now
            self.scheduler.deliver(call, EDGE_LEADING, since=now)
        else:
            state.pending = call

    def _fire(self, flush: bool) -> None:
        state = self.state
        call = state.pending
        burst_start = state.burst_start

        state.pending = None
        state.burst_start = None
        state.deadline = None
        logger.debug(f"Debounce '{self.config.name}' burst ended")

        if call is None:
            return
        if not self.config.trailing:
            self.scheduler.record("dropped_triggers")
            return

        state.last_invoke = self.scheduler.now()
        self.scheduler.deliver(
            call, EDGE_FLUSH if flush else EDGE_TRAILING, since=burst_start
        )


__all__ = ["DebouncePolicy"]
