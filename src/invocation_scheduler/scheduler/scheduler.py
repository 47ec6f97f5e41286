# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler implementation for the Invocation Scheduler.
"""

import dataclasses
import logging
from collections.abc import Callable
from typing import Any

from ..config import SchedulerConfig, SchedulerMode
from ..exceptions import ConfigurationError, MisuseError
from ..types.call import PendingCall
from ..types.status import SchedulerStatus
from .base import METRIC_FLUSHES, METRIC_TRIGGERS, BaseScheduler

logger = logging.getLogger(__name__)

# Keyword arguments of create_scheduler() that go to the Scheduler itself
_SCHEDULER_OPTIONS = ("on_complete", "timer_source", "metrics_collector")


class Scheduler(BaseScheduler):
    """
    Rate-limited invocation scheduler.

    This class acts as a facade that delegates all mode-specific decisions
    to a policy object (`BasePolicy`) selected by ``config.mode``. It owns
    the lock every operation runs under, checks that operations are valid
    for the mode and lifecycle state, and counts what happens.

    Example:
        >>> scheduler = Scheduler(SchedulerConfig.debounce(0.3), search)
        >>> for keystroke in ("p", "py", "pyt"):
        ...     scheduler.trigger(keystroke)
        >>> # search("pyt") runs 0.3s after the last keystroke
    """

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        """
        Report an event.

        Depending on the mode and state this invokes the callback
        immediately, (re)arms the timer, or only records the arguments as
        the latest pending call. Interval and Countdown schedulers start a
        run if stopped.

        Exceptions raised by an immediate invocation propagate unchanged.

        Raises:
            MisuseError: If the scheduler is closed
        """
        with self._operation():
            self._ensure_open("trigger")
            self.record(METRIC_TRIGGERS)
            call = PendingCall(args=args, kwargs=kwargs, triggered_at=self.now())
            self.policy.on_trigger(call)

    def start(self, *args: Any, **kwargs: Any) -> None:
        """Start an Interval or Countdown run (alias of trigger())."""
        self._require_run_mode("start")
        self.trigger(*args, **kwargs)

    def cancel(self) -> None:
        """
        Disarm the timer and discard pending work without invoking.

        Idempotent; allowed on a closed scheduler.
        """
        with self._lock:
            self._cancel_unlocked()

    def stop(self) -> None:
        """Stop an Interval or Countdown run (alias of cancel())."""
        self._require_run_mode("stop")
        self.cancel()

    def flush(self) -> bool:
        """
        Run the pending fire logic now instead of waiting for the timer.

        - Debounce/Throttle: deliver the pending trailing call, if any
        - Interval: deliver a tick now and restart the period
        - Countdown: finish now, ticking with 0 and completing

        Returns:
            True if there was pending work to act on, False otherwise

        Raises:
            MisuseError: If the scheduler is closed
        """
        with self._operation():
            self._ensure_open("flush")
            if not self.policy.has_work():
                return False
            self.record(METRIC_FLUSHES)
            logger.debug(f"Scheduler '{self.config.name}' flushing")
            self.policy.on_flush()
            return True

    def pause(self) -> None:
        """
        Pause an Interval or Countdown run.

        Pausing a stopped or already paused run is a no-op.

        Raises:
            MisuseError: In Debounce/Throttle mode, or if the scheduler is closed
        """
        with self._lock:
            self._ensure_open("pause")
            self.policy.pause()

    def resume(self) -> None:
        """
        Resume a paused Interval or Countdown run.

        Resuming a run that is not paused is a no-op.

        Raises:
            MisuseError: In Debounce/Throttle mode, or if the scheduler is closed
        """
        with self._lock:
            self._ensure_open("resume")
            self.policy.resume()

    @property
    def remaining(self) -> float | None:
        """
        Time left in seconds.

        Interval: until the next tick, None when stopped. Countdown: until
        completion, the full duration before start and 0.0 after completion.

        Raises:
            MisuseError: In Debounce/Throttle mode
        """
        with self._lock:
            return self.policy.remaining()

    def status(self) -> SchedulerStatus:
        """Get a read-only snapshot of the scheduler's state."""
        with self._lock:
            return self.policy.status()

    @property
    def mode(self) -> SchedulerMode:
        return self.config.mode

    def _require_run_mode(self, operation: str) -> None:
        if not self.config.mode.supports_pause:
            raise MisuseError(
                f"{operation}() is not supported in {self.config.mode.value} mode",
                operation=operation,
            )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.config.name!r}, "
            f"mode={self.config.mode.value}, delay={self.config.delay})"
        )


# Factory function for easy creation with dependency injection
def create_scheduler(
    callback: Callable[..., Any],
    mode: str | SchedulerMode | None = None,
    config: SchedulerConfig | None = None,
    **kwargs: Any,
) -> Scheduler:
    """
    Factory function to create a Scheduler.

    Args:
        callback: Consumer callback
        mode: Scheduler mode ("debounce", "throttle", "interval",
            "countdown", case-insensitive). If None, uses config.mode (or
            debounce if config is also None)
        config: Optional base configuration
        **kwargs: SchedulerConfig fields (delay, leading, ...) overriding
            the base configuration, and the Scheduler options on_complete,
            timer_source and metrics_collector

    Returns:
        Configured Scheduler instance

    Raises:
        ConfigurationError: If mode is unknown or the configuration is invalid

    Example:
        >>> scheduler = create_scheduler(save, "debounce", delay=0.5, max_wait=2.0)
    """
    options = {key: kwargs.pop(key) for key in _SCHEDULER_OPTIONS if key in kwargs}

    overrides = dict(kwargs)
    if mode is not None:
        overrides["mode"] = SchedulerMode.parse(mode)

    try:
        if config is None:
            config = SchedulerConfig(**overrides)
        elif overrides:
            config = dataclasses.replace(config, **overrides)
    except TypeError as e:
        raise ConfigurationError(f"Invalid scheduler option: {e}") from e

    return Scheduler(config, callback, **options)


__all__ = ["Scheduler", "create_scheduler"]
