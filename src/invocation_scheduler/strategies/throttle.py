# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Throttle policy.

At most one invocation per ``delay`` window. The window is anchored to the
time of the last invocation, not to individual triggers, so a steady
stream of triggers yields invocations exactly ``delay`` apart.
"""

import logging

from ..observability.constants import EDGE_FLUSH, EDGE_LEADING, EDGE_TRAILING
from ..types.call import PendingCall
from .base import BurstPolicy

logger = logging.getLogger(__name__)


class ThrottlePolicy(BurstPolicy):
    """
    Policy for SchedulerMode.THROTTLE.

    State machine: Idle -> Burst -> Idle.

    Every invocation restarts the window: ``last_invoke`` and
    ``burst_start`` move to the invocation time and one timer is armed for
    ``delay``. While that timer is live, triggers only replace the pending
    call. When it fires with a pending call (and ``trailing``), the call is
    delivered and the next window starts; when it fires with nothing
    pending, the burst ends.

    Example (delay=1.0, leading and trailing, triggers at 0, 0.25, 0.5,
    0.75, 1.25): invocations at 0 (first args), 1.0 (args from 0.75) and
    2.0 (args from 1.25); the timer at 3.0 ends the burst.
    """

    def on_trigger(self, call: PendingCall) -> None:
        state = self.state
        now = call.triggered_at
        delay = self.config.delay

        new_burst = state.burst_start is None
        if new_burst:
            state.burst_start = now
            logger.debug(f"Throttle '{self.config.name}' burst started at {now}")

        if self.config.leading and (
            state.last_invoke is None or now - state.last_invoke >= delay
        ):
            since = state.burst_start
            self.scheduler.disarm_timer()
            self.scheduler.discard_pending()
            self._restart_window(now)
            self.scheduler.deliver(call, EDGE_LEADING, since=since)
            return

        self.scheduler.store_pending(call)
        if state.timer is not None:
            return

        if new_burst or state.last_invoke is None:
            deadline = now + delay
        else:
            deadline = state.last_invoke + delay
        if self.config.max_wait is not None:
            deadline = min(deadline, state.burst_start + self.config.max_wait)
        self.scheduler.arm_timer(max(0.0, deadline - now))

    def _fire(self, flush: bool) -> None:
        state = self.state
        call = state.pending

        if call is None or not self.config.trailing:
            self.scheduler.disarm_timer()
            self.scheduler.discard_pending()
            state.burst_start = None
            logger.debug(f"Throttle '{self.config.name}' burst ended")
            return

        since = state.burst_start
        state.pending = None
        self._restart_window(self.scheduler.now())
        self.scheduler.deliver(
            call, EDGE_FLUSH if flush else EDGE_TRAILING, since=since
        )

    def _restart_window(self, now: float) -> None:
        self.state.last_invoke = now
        self.state.burst_start = now
        self.scheduler.arm_timer(self.config.delay)


__all__ = ["ThrottlePolicy"]
