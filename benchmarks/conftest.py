"""
Shared fixtures for benchmark tests.
"""

import pytest

from invocation_scheduler.timers.manual import ManualTimerSource


class CountingCallback:
    """Callback that only counts invocations, so measurements are pure overhead."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self, *args, **kwargs) -> None:
        self.count += 1


@pytest.fixture
def clock():
    """Fake clock so no real timers are involved."""
    return ManualTimerSource()


@pytest.fixture
def counting_callback():
    return CountingCallback()
