# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Mode policies for the invocation scheduler.

This package contains the policy implementations that decide what a
trigger, a timer fire, a flush or a cancel does for each scheduling mode.

Available Modes:
    - DEBOUNCE: Quiet-period based, leading/trailing edges bounded by max_wait
    - THROTTLE: At most one invocation per window anchored to the last one
    - INTERVAL: Repeating invocation with pause/resume
    - COUNTDOWN: Remaining-time ticks followed by a single completion

The base class `BasePolicy` defines the interface that all policies
implement.
"""

from typing import Any

from ..config import SchedulerMode
from .base import BasePolicy, BurstPolicy, RunPolicy
from .countdown import CountdownPolicy
from .debounce import DebouncePolicy
from .interval import IntervalPolicy
from .throttle import ThrottlePolicy

_POLICIES: dict[SchedulerMode, type[BasePolicy]] = {
    SchedulerMode.DEBOUNCE: DebouncePolicy,
    SchedulerMode.THROTTLE: ThrottlePolicy,
    SchedulerMode.INTERVAL: IntervalPolicy,
    SchedulerMode.COUNTDOWN: CountdownPolicy,
}


def create_policy(mode: str | SchedulerMode, scheduler: Any) -> BasePolicy:
    """
    Factory function to create the policy for a scheduling mode.

    Args:
        mode: SchedulerMode member or mode name ("debounce", "throttle",
            "interval", "countdown")
        scheduler: Scheduler instance the policy acts on

    Returns:
        Policy instance bound to ``scheduler``

    Raises:
        ConfigurationError: If mode is unknown
    """
    return _POLICIES[SchedulerMode.parse(mode)](scheduler)


__all__ = [
    "BasePolicy",
    "BurstPolicy",
    "CountdownPolicy",
    "DebouncePolicy",
    "IntervalPolicy",
    "RunPolicy",
    "ThrottlePolicy",
    "create_policy",
]
