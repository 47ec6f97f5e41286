"""Unit tests for DebouncedValue."""

from __future__ import annotations

from unittest.mock import Mock

from invocation_scheduler.value import DebouncedValue


class TestDebouncedValue:
    """Tests for settling behavior."""

    def test_settles_after_quiet_period(self, clock):
        on_change = Mock()
        value = DebouncedValue("", 0.5, on_change=on_change, timer_source=clock)

        value.set("p")
        value.set("py")

        assert value.value == ""
        assert value.latest == "py"
        assert value.is_pending

        clock.advance(0.5)

        assert value.value == "py"
        assert not value.is_pending
        on_change.assert_called_once_with("py")

    def test_equal_input_is_ignored(self, clock):
        value = DebouncedValue(1, 0.5, timer_source=clock)

        value.set(1)

        assert not value.is_pending
        assert value.scheduler.get_metrics()["triggers"] == 0

    def test_returning_to_settled_value_does_not_notify(self, clock):
        on_change = Mock()
        value = DebouncedValue("a", 0.5, on_change=on_change, timer_source=clock)

        value.set("b")
        value.set("a")
        clock.advance(0.5)

        assert value.value == "a"
        on_change.assert_not_called()

    def test_custom_equality(self, clock):
        on_change = Mock()
        value = DebouncedValue(
            "abc",
            0.5,
            equality_fn=lambda a, b: a.lower() == b.lower(),
            on_change=on_change,
            timer_source=clock,
        )

        value.set("ABC")
        clock.advance(0.5)

        assert value.value == "abc"
        on_change.assert_not_called()

    def test_cancel_reverts_latest(self, clock):
        value = DebouncedValue(0, 0.5, timer_source=clock)

        value.set(5)
        value.cancel()
        clock.advance(1.0)

        assert value.value == 0
        assert value.latest == 0
        assert not value.is_pending

    def test_flush_settles_now(self, clock):
        value = DebouncedValue(0, 0.5, timer_source=clock)

        value.set(7)
        value.flush()

        assert value.value == 7
        assert not value.is_pending

    def test_leading_settles_immediately(self, clock):
        value = DebouncedValue(0, 0.5, leading=True, timer_source=clock)

        value.set(1)

        assert value.value == 1

    def test_max_wait_bounds_settling(self, clock):
        value = DebouncedValue(0, 0.5, max_wait=1.0, timer_source=clock)

        for i in range(1, 6):
            value.set(i)
            clock.advance(0.25)

        assert value.value == 4

    def test_context_manager_closes(self, clock):
        with DebouncedValue(0, 0.5, timer_source=clock) as value:
            value.set(1)

        assert value.scheduler.is_closed
        assert value.value == 0

    def test_input_dropped_by_burst_can_settle_later(self, clock):
        """An input dropped without trailing is not treated as already seen."""
        value = DebouncedValue("", 0.5, leading=True, trailing=False, timer_source=clock)

        value.set("a")
        value.set("ab")
        clock.advance(5.0)
        assert value.value == "a"
        assert value.latest == "a"

        value.set("ab")
        clock.advance(5.0)
        assert value.value == "ab"

    def test_latest_follows_value_when_idle(self, clock):
        value = DebouncedValue(0, 0.5, timer_source=clock)

        value.set(3)
        assert value.latest == 3

        clock.advance(0.5)
        assert value.latest == 3
        assert not value.is_pending
