# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
DebouncedValue: a value holder that only settles after input goes quiet.

Typical use is a search box or a filter field whose raw value changes on
every keystroke while consumers should only see the value once the user
stops typing.
"""

import logging
import operator
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from typing_extensions import Self

from .config import SchedulerConfig
from .scheduler.scheduler import Scheduler
from .timers.base import BaseTimerSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DebouncedValue(Generic[T]):
    """
    Holds a value that follows its input with debounce semantics.

    ``set()`` records new input; ``value`` only changes once no new input
    has arrived for ``delay`` seconds (or immediately on the leading edge,
    or after ``max_wait``). An input equal to the one still waiting to
    settle, or to the settled value when nothing is waiting, is ignored
    (as decided by ``equality_fn``). A settled value equal to the current
    one does not call ``on_change``.

    Example:
        >>> query = DebouncedValue("", 0.3, on_change=run_search)
        >>> query.set("p")
        >>> query.set("py")
        >>> query.value  # still ""
        ''
    """

    def __init__(
        self,
        initial: T,
        delay: float,
        *,
        leading: bool = False,
        trailing: bool = True,
        max_wait: float | None = None,
        equality_fn: Callable[[T, T], bool] = operator.eq,
        on_change: Callable[[T], Any] | None = None,
        timer_source: BaseTimerSource | None = None,
        name: str = "debounced_value",
    ) -> None:
        self._value = initial
        self._latest = initial
        self._equality_fn = equality_fn
        self._on_change = on_change
        self.scheduler = Scheduler(
            SchedulerConfig.debounce(
                delay,
                leading=leading,
                trailing=trailing,
                max_wait=max_wait,
                name=name,
            ),
            self._settle,
            timer_source=timer_source,
        )

    @property
    def value(self) -> T:
        """The settled value."""
        return self._value

    @property
    def latest(self) -> T:
        """The input waiting to settle, or the settled value when none is."""
        if self.is_pending:
            return self._latest
        return self._value

    @property
    def is_pending(self) -> bool:
        """Whether an input is waiting to settle."""
        return self.scheduler.status().is_pending

    def set(self, value: T) -> None:
        """Record new input."""
        if self._equality_fn(value, self.latest):
            return
        self._latest = value
        self.scheduler.trigger(value)

    def cancel(self) -> None:
        """Drop unsettled input; ``latest`` reverts to ``value``."""
        self.scheduler.cancel()
        self._latest = self._value

    def flush(self) -> None:
        """Settle the pending input now."""
        self.scheduler.flush()

    def close(self) -> None:
        self.scheduler.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _settle(self, value: T) -> None:
        if self._equality_fn(value, self._value):
            return
        self._value = value
        logger.debug(f"Debounced value '{self.scheduler.config.name}' settled")
        if self._on_change is not None:
            self._on_change(value)


__all__ = ["DebouncedValue"]
