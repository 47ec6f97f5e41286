# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Pending call type for the invocation scheduler.

A PendingCall captures the arguments of one trigger so they can be
delivered to the callback later (latest trigger wins).
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PendingCall:
    """
    Arguments captured from a single trigger.

    Attributes:
        args: Positional arguments passed to trigger()
        kwargs: Keyword arguments passed to trigger()
        triggered_at: Timer-source timestamp of the trigger
    """

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    triggered_at: float = 0.0

    def invoke(self, callback: Callable[..., Any], *prefix: Any) -> Any:
        """Call ``callback(*prefix, *args, **kwargs)`` and return its result."""
        return callback(*prefix, *self.args, **self.kwargs)


EMPTY_CALL = PendingCall()


__all__ = ["EMPTY_CALL", "PendingCall"]
