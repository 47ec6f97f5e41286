"""
Shared fixtures for the invocation scheduler test suite.

All timing tests run on a ManualTimerSource, so "time" only moves when a
test advances the clock. Times used in tests are exact binary fractions
(0.25, 0.5, ...) to keep float comparisons exact.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from invocation_scheduler.config import SchedulerConfig
from invocation_scheduler.scheduler import Scheduler
from invocation_scheduler.timers.base import BaseTimerSource
from invocation_scheduler.timers.manual import ManualTimerSource


class Recorder:
    """Callback double that records every call and the clock time it ran at."""

    def __init__(self, clock: ManualTimerSource) -> None:
        self.clock = clock
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
        self.times: list[float] = []

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.calls.append((args, kwargs))
        self.times.append(self.clock.now())

    @property
    def args(self) -> list[tuple[Any, ...]]:
        return [args for args, _ in self.calls]

    @property
    def count(self) -> int:
        return len(self.calls)


class StubTimerSource(BaseTimerSource):
    """
    Timer source whose timers never fire on their own.

    Tests set ``current`` to move the clock and call the captured
    ``on_fire`` callables directly, which makes stale and racing fires
    reproducible.
    """

    def __init__(self) -> None:
        self.current = 0.0
        self.armed: list[tuple[float, Callable[[], None]]] = []
        self.disarmed: list[Any] = []

    def now(self) -> float:
        return self.current

    def arm(self, delay: float, on_fire: Callable[[], None]) -> int:
        self.armed.append((delay, on_fire))
        return len(self.armed) - 1

    def disarm(self, handle: int) -> None:
        self.disarmed.append(handle)

    def fire(self, index: int = -1) -> None:
        self.armed[index][1]()


@pytest.fixture
def clock() -> ManualTimerSource:
    """A fresh fake clock starting at 0."""
    return ManualTimerSource()


@pytest.fixture
def stub_source() -> StubTimerSource:
    return StubTimerSource()


@pytest.fixture
def recorder(clock: ManualTimerSource) -> Recorder:
    return Recorder(clock)


@pytest.fixture
def make_scheduler(clock, recorder):
    """Factory for schedulers on the fake clock; closes them on teardown."""
    created: list[Scheduler] = []

    def _make(
        config: SchedulerConfig,
        callback: Callable[..., Any] | None = None,
        **kwargs: Any,
    ) -> Scheduler:
        kwargs.setdefault("timer_source", clock)
        scheduler = Scheduler(config, callback or recorder, **kwargs)
        created.append(scheduler)
        return scheduler

    yield _make

    for scheduler in created:
        scheduler.close()
