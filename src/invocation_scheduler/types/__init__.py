# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions and constants."""

from .call import EMPTY_CALL, PendingCall
from .status import SchedulerStatus

__all__ = [
    "EMPTY_CALL",
    # Trigger arguments
    "PendingCall",
    # Status snapshot
    "SchedulerStatus",
]
