# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Timer source implementations.

This module provides the abstract base class and concrete implementations
of the clock + one-shot timer capability that drives a Scheduler.

Available timer sources:
- BaseTimerSource: Abstract base class defining the timer interface
- ThreadingTimerSource: time.monotonic() + threading.Timer (default)
- AsyncioTimerSource: loop.time() + loop.call_later for asyncio programs
- ManualTimerSource: Controllable fake clock for deterministic tests
"""

from invocation_scheduler.timers.base import BaseTimerSource, TimerHandle
from invocation_scheduler.timers.event_loop import AsyncioTimerSource
from invocation_scheduler.timers.manual import ManualTimerHandle, ManualTimerSource
from invocation_scheduler.timers.threaded import (
    ThreadingTimerSource,
    get_default_timer_source,
)

__all__ = [
    "AsyncioTimerSource",
    # Base classes
    "BaseTimerSource",
    "ManualTimerHandle",
    # Fake clock
    "ManualTimerSource",
    "ThreadingTimerSource",
    "TimerHandle",
    "get_default_timer_source",
]
