# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
BaseScheduler for the Invocation Scheduler.

Owns everything the mode policies share: the lock, the state, the single
timer, the metrics and the callback delivery path.
"""

import contextlib
import functools
import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Iterator
from typing import Any

from typing_extensions import Self

from ..config import SchedulerConfig
from ..exceptions import CallbackError, MisuseError
from ..observability.collector import get_metrics_collector
from ..observability.constants import (
    DEFERRAL_SECONDS,
    PENDING_SCHEDULERS,
    short_to_prometheus_name,
)
from ..observability.protocols import MetricsCollectorProtocol
from ..strategies import create_policy
from ..timers.base import BaseTimerSource
from ..timers.threaded import get_default_timer_source
from ..types.call import PendingCall
from .state import SchedulerState

logger = logging.getLogger(__name__)

# Per-instance counter names
METRIC_TRIGGERS = "triggers"
METRIC_INVOCATIONS = "invocations"
METRIC_DROPPED_TRIGGERS = "dropped_triggers"
METRIC_CANCELLATIONS = "cancellations"
METRIC_FLUSHES = "flushes"
METRIC_CALLBACK_ERRORS = "callback_errors"


class BaseScheduler:
    """
    Shared machinery for Scheduler.

    This class provides the services the mode policies are built on:
    - Timer ownership with at most one live timer and a generation counter
      that turns stale fires into no-ops.
    - Callback delivery that records invocations, deferral latency and
      callback failures.
    - Per-instance counters mirrored into a metrics collector.
    - Lifecycle (close() and the context manager protocol).

    All state changes happen under a single re-entrant lock. Invocations
    are queued while the lock is held and run after it is released, so a
    slow callback never blocks trigger() on another thread, and a callback
    may call back into its own scheduler and sees finalized state.
    Invocations produced on different threads may overlap.
    """

    def __init__(
        self,
        config: SchedulerConfig,
        callback: Callable[..., Any],
        *,
        on_complete: Callable[[], Any] | None = None,
        timer_source: BaseTimerSource | None = None,
        metrics_collector: MetricsCollectorProtocol | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            config: Validated scheduler configuration
            callback: Consumer callback. Countdown schedulers call it as
                ``callback(remaining, *args, **kwargs)``; all other modes as
                ``callback(*args, **kwargs)``
            on_complete: Called once when a Countdown reaches zero
            timer_source: Clock and timer capability (defaults to the shared
                ThreadingTimerSource)
            metrics_collector: Metrics sink; defaults to the global collector
                when ``config.metrics_enabled`` is set
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")

        self.config = config
        self.callback = callback
        self.on_complete = on_complete
        self.timer_source = timer_source or get_default_timer_source()
        self.state = SchedulerState()

        self._lock = threading.RLock()
        self._closed = False
        # Invocations queued under the lock, run once it is released
        self._outbox: list[Callable[[], Any]] = []

        self._setup_metrics(metrics_collector)

        # Policy last: it reads the attributes above
        self.policy = create_policy(config.mode, self)

        logger.debug(
            f"Initialized scheduler '{config.name}' mode={config.mode.value} "
            f"delay={config.delay}"
        )

    def _setup_metrics(self, metrics_collector: MetricsCollectorProtocol | None) -> None:
        """Setup per-instance counters and the optional collector."""
        self.metrics: dict[str, int] = defaultdict(int)
        self.metrics.update(
            {
                METRIC_TRIGGERS: 0,
                METRIC_INVOCATIONS: 0,
                METRIC_DROPPED_TRIGGERS: 0,
                METRIC_CANCELLATIONS: 0,
                METRIC_FLUSHES: 0,
                METRIC_CALLBACK_ERRORS: 0,
            }
        )

        if metrics_collector is not None:
            self.metrics_collector: MetricsCollectorProtocol | None = metrics_collector
        elif self.config.metrics_enabled:
            self.metrics_collector = get_metrics_collector()
        else:
            self.metrics_collector = None

        self._labels = {"scheduler": self.config.name, "mode": self.config.mode.value}

    # ------------------------------------------------------------------
    # Services used by the mode policies (lock already held)
    # ------------------------------------------------------------------

    def now(self) -> float:
        """Current time on the scheduler's timer source."""
        return self.timer_source.now()

    def arm_timer(self, delay: float) -> None:
        """Replace the live timer (if any) with one firing after ``delay``."""
        state = self.state
        was_live = state.timer is not None
        if was_live:
            self.timer_source.disarm(state.timer)

        state.generation += 1
        state.due_at = self.now() + max(0.0, delay)
        state.timer = self.timer_source.arm(
            delay, functools.partial(self._on_timer, state.generation)
        )

        if not was_live:
            self._gauge(1)

    def disarm_timer(self) -> None:
        """Disarm the live timer, if any."""
        state = self.state
        state.generation += 1
        if state.timer is None:
            return

        self.timer_source.disarm(state.timer)
        state.timer = None
        state.due_at = None
        self._gauge(-1)

    def store_pending(self, call: PendingCall) -> None:
        """Make ``call`` the pending call, superseding any earlier one."""
        if self.state.pending is not None:
            self.record(METRIC_DROPPED_TRIGGERS)
        self.state.pending = call

    def discard_pending(self) -> None:
        """Drop the pending call without delivering it."""
        if self.state.pending is not None:
            self.record(METRIC_DROPPED_TRIGGERS)
            self.state.pending = None

    def deliver(
        self,
        call: PendingCall,
        edge: str,
        *prefix: Any,
        since: float | None = None,
    ) -> None:
        """
        Queue an invocation of the callback with ``call``'s arguments.

        The invocation is counted now and runs once the current operation
        releases the lock. Exceptions raised by the callback are counted
        and propagate to whoever ran the operation.

        Args:
            call: Arguments to deliver
            edge: Which obligation produced the invocation (metric label)
            *prefix: Positional arguments placed before the call's own
            since: Start of the deferral period, for the latency histogram
        """
        self.record(METRIC_INVOCATIONS, edge=edge)
        if since is not None and self.metrics_collector is not None:
            self.metrics_collector.observe_histogram(
                DEFERRAL_SECONDS, self.now() - since, labels=self._labels
            )
        self._outbox.append(functools.partial(self._invoke, call, edge, prefix))

    def notify_complete(self) -> None:
        """Queue the on_complete callback, if one was given."""
        if self.on_complete is not None:
            self._outbox.append(functools.partial(self._complete, self.on_complete))

    def _invoke(self, call: PendingCall, edge: str, prefix: tuple[Any, ...]) -> None:
        logger.debug(f"Scheduler '{self.config.name}' invoking callback ({edge})")
        try:
            call.invoke(self.callback, *prefix)
        except Exception as e:
            with self._lock:
                self.record(METRIC_CALLBACK_ERRORS)
            logger.debug(f"Scheduler '{self.config.name}' callback raised {e!r}")
            raise

    def _complete(self, on_complete: Callable[[], Any]) -> None:
        logger.debug(f"Scheduler '{self.config.name}' completed")
        try:
            on_complete()
        except Exception:
            with self._lock:
                self.record(METRIC_CALLBACK_ERRORS)
            raise

    @contextlib.contextmanager
    def _operation(self) -> Iterator[None]:
        """Hold the lock for an operation, then run what it queued."""
        with self._lock:
            try:
                yield
            finally:
                actions, self._outbox = self._outbox, []
        self._dispatch(actions)

    def _dispatch(self, actions: list[Callable[[], Any]]) -> None:
        """
        Run queued invocations in order without holding the lock.

        Every action runs even if an earlier one raises; the first
        exception is re-raised afterwards and later ones are logged.
        """
        error: Exception | None = None
        for action in actions:
            try:
                action()
            except Exception as e:
                if error is None:
                    error = e
                else:
                    logger.error(
                        f"Scheduler '{self.config.name}' callback raised {e!r} "
                        f"after an earlier failure",
                        exc_info=e,
                    )
        if error is not None:
            raise error

    def record(self, name: str, value: int = 1, **labels: str) -> None:
        """Increment a per-instance counter and mirror it to the collector."""
        self.metrics[name] += value
        if self.metrics_collector is not None:
            self.metrics_collector.inc_counter(
                short_to_prometheus_name(name),
                value,
                labels={**self._labels, **labels},
            )

    def _gauge(self, delta: int) -> None:
        if self.metrics_collector is None:
            return
        labels = {"mode": self.config.mode.value}
        if delta > 0:
            self.metrics_collector.inc_gauge(PENDING_SCHEDULERS, delta, labels=labels)
        else:
            self.metrics_collector.dec_gauge(PENDING_SCHEDULERS, -delta, labels=labels)

    # ------------------------------------------------------------------
    # Timer fire path
    # ------------------------------------------------------------------

    def _on_timer(self, generation: int) -> None:
        """Entry point for the timer source; runs the policy's fire logic."""
        with self._lock:
            state = self.state
            if generation != state.generation or state.timer is None:
                logger.debug(
                    f"Scheduler '{self.config.name}' ignoring stale timer "
                    f"(generation {generation}, current {state.generation})"
                )
                return

            state.timer = None
            state.due_at = None
            self._gauge(-1)

            try:
                self.policy.on_fire()
            finally:
                actions, self._outbox = self._outbox, []

        try:
            self._dispatch(actions)
        except Exception as e:
            raise CallbackError(
                f"Callback of scheduler '{self.config.name}' failed: {e}",
                scheduler_name=self.config.name,
                original=e,
            ) from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise MisuseError("Scheduler is closed", operation=operation)

    @property
    def is_closed(self) -> bool:
        """Check if close() has been called."""
        return self._closed

    def close(self) -> None:
        """
        Cancel any pending work and disarm the timer.

        After close(), trigger(), flush(), pause() and resume() raise
        MisuseError. Calling close() again is a no-op.
        """
        with self._lock:
            if self._closed:
                return
            self._cancel_unlocked()
            self._closed = True
        logger.debug(f"Scheduler '{self.config.name}' closed")

    def _cancel_unlocked(self) -> bool:
        discarded = self.policy.on_cancel()
        # Invalidate any fire already in flight even when no timer was live
        self.state.generation += 1
        if discarded:
            self.record(METRIC_CANCELLATIONS)
            logger.debug(f"Scheduler '{self.config.name}' cancelled pending work")
        return discarded

    def __enter__(self) -> Self:
        """
        Context manager entry.

        Returns:
            Self: The scheduler instance

        Example:
            with Scheduler(SchedulerConfig.debounce(0.3), save) as scheduler:
                scheduler.trigger(document)
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Context manager exit; closes the scheduler."""
        self.close()

    def get_metrics(self) -> dict[str, Any]:
        """Get the per-instance counters plus the scheduler's mode and name."""
        with self._lock:
            result: dict[str, Any] = dict(self.metrics)
        result["mode"] = self.config.mode.value
        result["name"] = self.config.name
        return result


__all__ = [
    "METRIC_CALLBACK_ERRORS",
    "METRIC_CANCELLATIONS",
    "METRIC_DROPPED_TRIGGERS",
    "METRIC_FLUSHES",
    "METRIC_INVOCATIONS",
    "METRIC_TRIGGERS",
    "BaseScheduler",
]
