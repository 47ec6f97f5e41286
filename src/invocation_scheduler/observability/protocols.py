# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol for the metrics sink a scheduler reports to.

A scheduler only ever increments counters, moves the pending-schedulers
gauge and observes deferral times. Any object with these four methods
(the bundled UnifiedMetricsCollector, a StatsD adapter, a Mock) can be
passed as ``metrics_collector``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsCollectorProtocol(Protocol):
    """
    Metrics sink used by BaseScheduler.

    Calls arrive with the scheduler's lock held, possibly from a timer
    thread, so implementations must be thread-safe and fast.

    Example:
        >>> class PrintingSink:
        ...     def inc_counter(self, name, value=1, labels=None):
        ...         print(name, value, labels)
        ...     def inc_gauge(self, name, value=1.0, labels=None): pass
        ...     def dec_gauge(self, name, value=1.0, labels=None): pass
        ...     def observe_histogram(self, name, value, labels=None): pass
        >>>
        >>> isinstance(PrintingSink(), MetricsCollectorProtocol)
        True
    """

    def inc_counter(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None:
        """
        Add ``value`` to a counter such as triggers or invocations.

        ``labels`` always carries ``scheduler`` and ``mode``; invocations
        add ``edge``.
        """
        ...

    def inc_gauge(
        self,
        name: str,
        value: float = 1.0,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Raise a gauge (a scheduler armed its timer)."""
        ...

    def dec_gauge(
        self,
        name: str,
        value: float = 1.0,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Lower a gauge (a scheduler's timer fired or was disarmed)."""
        ...

    def observe_histogram(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Record a deferral time in seconds."""
        ...


__all__ = [
    "MetricsCollectorProtocol",
]
