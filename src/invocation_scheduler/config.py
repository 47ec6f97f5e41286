# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler Configuration for Invocation Scheduler

This module provides the configuration classes for the invocation scheduler,
including the scheduling mode and the timing parameters of each policy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigurationError


class SchedulerMode(Enum):
    """Scheduling mode that selects the policy governing invocations.

    - DEBOUNCE: Every trigger resets the quiet period. The callback runs on
      the leading and/or trailing edge of a burst, bounded by max_wait.
    - THROTTLE: The window is anchored to the last invocation. At most one
      invocation per delay window.
    - INTERVAL: Repeating invocation every delay seconds once started.
      Supports pause/resume.
    - COUNTDOWN: Ticks with the time remaining until delay has elapsed, then
      completes exactly once. Supports pause/resume.
    """

    DEBOUNCE = "debounce"
    THROTTLE = "throttle"
    INTERVAL = "interval"
    COUNTDOWN = "countdown"

    @classmethod
    def parse(cls, value: str | SchedulerMode) -> SchedulerMode:
        """Resolve a mode from an enum member or a case-insensitive name."""
        if isinstance(value, SchedulerMode):
            return value
        try:
            return cls(value.lower())
        except (AttributeError, ValueError) as e:
            raise ConfigurationError(f"Unknown scheduler mode: {value}") from e

    @property
    def supports_pause(self) -> bool:
        return self in (SchedulerMode.INTERVAL, SchedulerMode.COUNTDOWN)


# Default countdown re-check cadence in seconds
DEFAULT_TICK_INTERVAL = 0.1


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Configuration for a single Scheduler instance.

    Instances are immutable; use dataclasses.replace() to derive variants.
    """

    # === Timing ===

    delay: float = 0.0
    """Quiet period, interval or countdown duration in seconds."""

    leading: bool = False
    """Invoke on the first trigger of a burst (Interval: on start;
    Countdown: emit an immediate tick)."""

    trailing: bool = True
    """Invoke after the quiet period following the last trigger of a burst."""

    max_wait: float | None = None
    """Upper bound in seconds on how long an invocation can be deferred
    since the burst started. Debounce and Throttle only."""

    mode: SchedulerMode = SchedulerMode.DEBOUNCE
    """Policy that governs the scheduler."""

    # === Countdown ===

    tick_interval: float = DEFAULT_TICK_INTERVAL
    """Re-check cadence in seconds for Countdown mode."""

    # === Observability ===

    name: str = "default"
    """Scheduler name used in log lines and metric labels."""

    metrics_enabled: bool = False
    """Report to the global metrics collector when none is injected."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.mode, SchedulerMode):
            object.__setattr__(self, "mode", SchedulerMode.parse(self.mode))
        for field_name in ("delay", "max_wait", "tick_interval"):
            value = getattr(self, field_name)
            if value is not None and not math.isfinite(value):
                raise ConfigurationError(f"{field_name} must be finite, got {value}")
        if self.delay < 0:
            raise ConfigurationError(f"delay must be non-negative, got {self.delay}")
        if self.mode is SchedulerMode.INTERVAL and self.delay == 0:
            raise ConfigurationError("delay must be positive in interval mode")
        if self.max_wait is not None:
            if self.mode.supports_pause:
                raise ConfigurationError(
                    f"max_wait is not supported in {self.mode.value} mode"
                )
            if self.max_wait < self.delay:
                raise ConfigurationError(
                    f"max_wait ({self.max_wait}) must be >= delay ({self.delay})"
                )
        if self.tick_interval <= 0:
            raise ConfigurationError(
                f"tick_interval must be positive, got {self.tick_interval}"
            )

    # === Convenience constructors ===

    @classmethod
    def debounce(
        cls,
        delay: float,
        *,
        leading: bool = False,
        trailing: bool = True,
        max_wait: float | None = None,
        name: str = "default",
        metrics_enabled: bool = False,
    ) -> SchedulerConfig:
        return cls(
            delay=delay,
            leading=leading,
            trailing=trailing,
            max_wait=max_wait,
            mode=SchedulerMode.DEBOUNCE,
            name=name,
            metrics_enabled=metrics_enabled,
        )

    @classmethod
    def throttle(
        cls,
        delay: float,
        *,
        leading: bool = True,
        trailing: bool = True,
        max_wait: float | None = None,
        name: str = "default",
        metrics_enabled: bool = False,
    ) -> SchedulerConfig:
        return cls(
            delay=delay,
            leading=leading,
            trailing=trailing,
            max_wait=max_wait,
            mode=SchedulerMode.THROTTLE,
            name=name,
            metrics_enabled=metrics_enabled,
        )

    @classmethod
    def interval(
        cls,
        delay: float,
        *,
        leading: bool = False,
        name: str = "default",
        metrics_enabled: bool = False,
    ) -> SchedulerConfig:
        return cls(
            delay=delay,
            leading=leading,
            mode=SchedulerMode.INTERVAL,
            name=name,
            metrics_enabled=metrics_enabled,
        )

    @classmethod
    def countdown(
        cls,
        duration: float,
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        leading: bool = False,
        name: str = "default",
        metrics_enabled: bool = False,
    ) -> SchedulerConfig:
        return cls(
            delay=duration,
            leading=leading,
            mode=SchedulerMode.COUNTDOWN,
            tick_interval=tick_interval,
            name=name,
            metrics_enabled=metrics_enabled,
        )


__all__ = [
    "DEFAULT_TICK_INTERVAL",
    "SchedulerConfig",
    "SchedulerMode",
]
