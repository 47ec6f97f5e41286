# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler that decides when a stream of triggers invokes a callback.

This module provides:
- Scheduler: The rate-limited invocation scheduler facade
- BaseScheduler: Timer, metrics and delivery machinery shared by the policies
- SchedulerState: Mutable per-instance state
- create_scheduler: Factory building a Scheduler from keyword options
"""

from .base import BaseScheduler
from .scheduler import Scheduler, create_scheduler
from .state import SchedulerState

__all__ = [
    # Base
    "BaseScheduler",
    # Scheduler
    "Scheduler",
    # State
    "SchedulerState",
    "create_scheduler",
]
