# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Invocation Scheduler - Decide when a stream of triggers runs a callback.

This library provides one rate-limited invocation scheduler that covers
debounce, throttle, interval and countdown behavior behind a single state
machine, with cancel, flush, pause/resume and status inspection.

Key Features:
    - Debounce with leading/trailing edges and a max_wait bound
    - Throttle anchored to the last invocation
    - Interval and countdown timers with pause/resume
    - Injectable timer sources (threads, asyncio, manual fake clock)
    - Prometheus metrics through a unified collector

Quick Start:
    >>> from invocation_scheduler import SchedulerConfig, Scheduler
    >>>
    >>> scheduler = Scheduler(SchedulerConfig.debounce(0.3), search)
    >>> scheduler.trigger("pyth")
    >>> scheduler.trigger("python")  # search("python") runs 0.3s later
    >>> scheduler.status().is_pending
    True

Main Exports:
    - Scheduler, create_scheduler: Core scheduling components
    - SchedulerConfig, SchedulerMode: Configuration options
    - ThreadingTimerSource, AsyncioTimerSource, ManualTimerSource: Timer sources
    - debounce, throttle: Function decorators
    - DebouncedValue: Debounced value holder

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import DEFAULT_TICK_INTERVAL, SchedulerConfig, SchedulerMode
from .decorators import debounce, throttle
from .exceptions import (
    CallbackError,
    ConfigurationError,
    MisuseError,
    SchedulerError,
)
from .observability import (
    MetricsCollectorProtocol,
    UnifiedMetricsCollector,
    get_metrics_collector,
)
from .scheduler import BaseScheduler, Scheduler, create_scheduler
from .timers import (
    AsyncioTimerSource,
    BaseTimerSource,
    ManualTimerSource,
    ThreadingTimerSource,
)
from .types import PendingCall, SchedulerStatus
from .value import DebouncedValue

__all__ = [
    "DEFAULT_TICK_INTERVAL",
    "AsyncioTimerSource",
    "BaseScheduler",
    "BaseTimerSource",
    "CallbackError",
    "ConfigurationError",
    "DebouncedValue",
    "ManualTimerSource",
    "MetricsCollectorProtocol",
    "MisuseError",
    "PendingCall",
    "Scheduler",
    "SchedulerConfig",
    "SchedulerError",
    "SchedulerMode",
    "SchedulerStatus",
    "ThreadingTimerSource",
    "UnifiedMetricsCollector",
    "__version__",
    "create_scheduler",
    "debounce",
    "get_metrics_collector",
    "throttle",
]
