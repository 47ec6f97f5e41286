"""Unit tests for PendingCall and SchedulerStatus."""

from __future__ import annotations

import dataclasses

import pytest

from invocation_scheduler.config import SchedulerMode
from invocation_scheduler.types import EMPTY_CALL, PendingCall, SchedulerStatus


class TestPendingCall:
    """Tests for PendingCall."""

    def test_invoke_passes_args_and_kwargs(self):
        call = PendingCall(args=(1, 2), kwargs={"key": "v"}, triggered_at=3.0)
        seen = []

        result = call.invoke(lambda *a, **kw: seen.append((a, kw)) or "done")

        assert result == "done"
        assert seen == [((1, 2), {"key": "v"})]

    def test_invoke_with_prefix(self):
        """Prefix arguments come before the captured ones."""
        call = PendingCall(args=("label",))
        seen = []

        call.invoke(lambda *a: seen.append(a), 0.5)

        assert seen == [(0.5, "label")]

    def test_empty_call(self):
        assert EMPTY_CALL.args == ()
        assert EMPTY_CALL.kwargs == {}

    def test_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            EMPTY_CALL.triggered_at = 1.0  # type: ignore[misc]


class TestSchedulerStatus:
    """Tests for SchedulerStatus."""

    def test_defaults(self):
        status = SchedulerStatus(mode=SchedulerMode.DEBOUNCE)

        assert not status.is_pending
        assert not status.is_running
        assert not status.is_paused
        assert status.remaining is None

    def test_equality(self):
        a = SchedulerStatus(SchedulerMode.INTERVAL, is_pending=True, remaining=0.5)
        b = SchedulerStatus(SchedulerMode.INTERVAL, is_pending=True, remaining=0.5)
        assert a == b
