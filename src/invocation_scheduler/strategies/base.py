# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base mode policy for the invocation scheduler.

This module defines the abstract base class that all mode policies
(DEBOUNCE, THROTTLE, INTERVAL, COUNTDOWN) implement. The Scheduler owns
the lock, the state and the timer; a policy only decides what a trigger,
a timer fire, a flush or a cancel does to that state.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..exceptions import MisuseError
from ..types.call import PendingCall
from ..types.status import SchedulerStatus

if TYPE_CHECKING:
    from ..config import SchedulerConfig
    from ..scheduler.state import SchedulerState

# Deadlines closer than this many seconds count as reached (float drift)
CLOCK_TOLERANCE = 1e-9


class BasePolicy(ABC):
    """
    Abstract base class for scheduler mode policies.

    Every method is called with the scheduler's lock held.
    ``scheduler.deliver()`` only queues an invocation; the callback runs
    after the lock is released and may re-enter the scheduler, so the
    state must be final by the time the method returns.

    Attributes:
        scheduler: Owning scheduler, providing now(), arm_timer(),
            disarm_timer(), deliver() and the metrics helpers
        config: Scheduler configuration
        state: Mutable state owned by the scheduler
    """

    def __init__(self, scheduler: Any):  # BaseScheduler
        self.scheduler = scheduler
        self.config: SchedulerConfig = scheduler.config
        self.state: SchedulerState = scheduler.state

    @abstractmethod
    def on_trigger(self, call: PendingCall) -> None:
        """Handle a trigger carrying ``call``'s arguments."""
        pass

    @abstractmethod
    def on_fire(self) -> None:
        """Handle expiry of the live timer (already cleared by the scheduler)."""
        pass

    @abstractmethod
    def has_work(self) -> bool:
        """Whether flush() has anything to act on."""
        pass

    @abstractmethod
    def on_flush(self) -> None:
        """Run the fire logic now. Only called when has_work() is true."""
        pass

    @abstractmethod
    def on_cancel(self) -> bool:
        """
        Disarm and discard all pending work without invoking.

        Returns:
            True if there was anything to discard
        """
        pass

    @abstractmethod
    def status(self) -> SchedulerStatus:
        """Build a status snapshot without mutating state."""
        pass

    # Mode-specific operations; only Interval and Countdown support them

    def pause(self) -> None:
        raise MisuseError(
            f"pause() is not supported in {self.config.mode.value} mode",
            operation="pause",
        )

    def resume(self) -> None:
        raise MisuseError(
            f"resume() is not supported in {self.config.mode.value} mode",
            operation="resume",
        )

    def remaining(self) -> float | None:
        raise MisuseError(
            f"remaining is not supported in {self.config.mode.value} mode",
            operation="remaining",
        )


class BurstPolicy(BasePolicy):
    """
    Common behavior of the burst-based policies (Debounce and Throttle).

    A burst starts with the first trigger after idle and ends when the
    trailing obligation has been discharged or the scheduler is cancelled.
    """

    def has_work(self) -> bool:
        return self.state.timer is not None

    def on_flush(self) -> None:
        self.scheduler.disarm_timer()
        self._fire(flush=True)

    def on_fire(self) -> None:
        self._fire(flush=False)

    @abstractmethod
    def _fire(self, flush: bool) -> None:
        pass

    def on_cancel(self) -> bool:
        state = self.state
        discarded = (
            state.timer is not None
            or state.pending is not None
            or state.burst_start is not None
        )
        self.scheduler.disarm_timer()
        self.scheduler.discard_pending()
        state.burst_start = None
        state.deadline = None
        state.last_invoke = None
        return discarded

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            mode=self.config.mode,
            is_pending=self.state.pending is not None,
            is_running=self.state.burst_start is not None,
        )


class RunPolicy(BasePolicy):
    """
    Common behavior of the run-based policies (Interval and Countdown).

    A run starts with the first trigger (or start()) while stopped and lasts
    until it is cancelled or, for Countdown, completes.
    """

    def has_work(self) -> bool:
        return self.state.running

    def pause(self) -> None:
        state = self.state
        if not state.running or state.paused:
            return
        self._pause()
        state.paused = True

    def resume(self) -> None:
        state = self.state
        if not state.paused:
            return
        state.paused = False
        self._resume()

    @abstractmethod
    def _pause(self) -> None:
        pass

    @abstractmethod
    def _resume(self) -> None:
        pass

    def status(self) -> SchedulerStatus:
        state = self.state
        return SchedulerStatus(
            mode=self.config.mode,
            is_pending=state.running,
            is_running=state.running and not state.paused,
            is_paused=state.paused,
            remaining=self.remaining(),
        )


__all__ = ["CLOCK_TOLERANCE", "BasePolicy", "BurstPolicy", "RunPolicy"]
