"""Unit tests for create_policy() and the policy base classes."""

from __future__ import annotations

import pytest

from invocation_scheduler.config import SchedulerConfig, SchedulerMode
from invocation_scheduler.exceptions import ConfigurationError, MisuseError
from invocation_scheduler.strategies import (
    BurstPolicy,
    CountdownPolicy,
    DebouncePolicy,
    IntervalPolicy,
    RunPolicy,
    ThrottlePolicy,
    create_policy,
)


class TestCreatePolicy:
    """Tests for the policy factory."""

    @pytest.mark.parametrize(
        ("mode", "cls"),
        [
            (SchedulerMode.DEBOUNCE, DebouncePolicy),
            ("throttle", ThrottlePolicy),
            ("interval", IntervalPolicy),
            (SchedulerMode.COUNTDOWN, CountdownPolicy),
        ],
    )
    def test_selects_policy(self, mode, cls, make_scheduler):
        scheduler = make_scheduler(SchedulerConfig(delay=1.0))

        policy = create_policy(mode, scheduler)

        assert type(policy) is cls
        assert policy.scheduler is scheduler

    def test_unknown_mode(self, make_scheduler):
        scheduler = make_scheduler(SchedulerConfig(delay=1.0))

        with pytest.raises(ConfigurationError):
            create_policy("backoff", scheduler)

    def test_policy_families(self):
        assert issubclass(DebouncePolicy, BurstPolicy)
        assert issubclass(ThrottlePolicy, BurstPolicy)
        assert issubclass(IntervalPolicy, RunPolicy)
        assert issubclass(CountdownPolicy, RunPolicy)


class TestBurstPolicyMisuse:
    """Burst policies reject pause and resume."""

    @pytest.mark.parametrize("operation", ["pause", "resume"])
    def test_pause_resume_raise(self, operation, make_scheduler):
        scheduler = make_scheduler(SchedulerConfig.throttle(1.0))

        with pytest.raises(MisuseError) as exc_info:
            getattr(scheduler, operation)()

        assert exc_info.value.operation == operation
