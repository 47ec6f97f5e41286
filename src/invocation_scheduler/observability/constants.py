# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

This module provides standardized metric names for all observability
in the invocation-scheduler library. All metric names use the
`invocation_scheduler_` prefix for Prometheus compatibility.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`
    - Gauges use present-tense descriptive names

Label Best Practices:
    To prevent label cardinality explosion, use only:
    - `scheduler` - Scheduler name (categorical: search_box, resize)
    - `mode` - Scheduling mode (enum: debounce, throttle, interval, countdown)
    - `edge` - Which obligation produced an invocation (enum, see EDGES)

    NEVER use trigger arguments or timestamps as label values.

Usage:
    >>> from invocation_scheduler.observability.constants import (
    ...     INVOCATIONS_TOTAL, METRIC_PREFIX
    ... )
    >>> print(INVOCATIONS_TOTAL)
    'invocation_scheduler_invocations_total'
"""


# =============================================================================
# Global Prefix
# =============================================================================

METRIC_PREFIX = "invocation_scheduler"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Scheduling Metrics (scheduler/base.py)
# =============================================================================

TRIGGERS_TOTAL = f"{METRIC_PREFIX}_triggers_total"
"""Total trigger() calls accepted."""

INVOCATIONS_TOTAL = f"{METRIC_PREFIX}_invocations_total"
"""Total callback invocations, labelled by edge."""

DROPPED_TRIGGERS_TOTAL = f"{METRIC_PREFIX}_dropped_triggers_total"
"""Total triggers whose arguments were superseded before delivery."""

CANCELLATIONS_TOTAL = f"{METRIC_PREFIX}_cancellations_total"
"""Total cancel() calls that discarded pending work."""

FLUSHES_TOTAL = f"{METRIC_PREFIX}_flushes_total"
"""Total flush() calls that forced an invocation."""

CALLBACK_ERRORS_TOTAL = f"{METRIC_PREFIX}_callback_errors_total"
"""Total callback invocations that raised."""


# =============================================================================
# Gauge Metrics
# =============================================================================

PENDING_SCHEDULERS = f"{METRIC_PREFIX}_pending_schedulers"
"""Schedulers that currently hold a live timer."""


# =============================================================================
# Histogram Metrics
# =============================================================================

DEFERRAL_SECONDS = f"{METRIC_PREFIX}_deferral_seconds"
"""Time between the start of a burst and the delivered invocation."""


# =============================================================================
# Edge label values
# =============================================================================

EDGE_LEADING = "leading"
EDGE_TRAILING = "trailing"
EDGE_MAX_WAIT = "max_wait"
EDGE_INTERVAL = "interval"
EDGE_TICK = "tick"
EDGE_COMPLETE = "complete"
EDGE_FLUSH = "flush"

EDGES = frozenset(
    {
        EDGE_LEADING,
        EDGE_TRAILING,
        EDGE_MAX_WAIT,
        EDGE_INTERVAL,
        EDGE_TICK,
        EDGE_COMPLETE,
        EDGE_FLUSH,
    }
)


# =============================================================================
# Histogram Bucket Definitions
# =============================================================================

DEFERRAL_BUCKETS = [
    0.001,
    0.005,
    0.01,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
]
"""Histogram buckets for deferral latency (1ms to 30s)."""


# =============================================================================
# Short name mapping
# =============================================================================

SHORT_METRIC_MAPPING = {
    "triggers": TRIGGERS_TOTAL,
    "invocations": INVOCATIONS_TOTAL,
    "dropped_triggers": DROPPED_TRIGGERS_TOTAL,
    "cancellations": CANCELLATIONS_TOTAL,
    "flushes": FLUSHES_TOTAL,
    "callback_errors": CALLBACK_ERRORS_TOTAL,
}


def short_to_prometheus_name(short_name: str) -> str:
    """
    Convert a short per-scheduler counter name to its Prometheus-style name.

    Args:
        short_name: Short metric name (e.g., "invocations")

    Returns:
        Prometheus-style name (e.g., "invocation_scheduler_invocations_total")

    Example:
        >>> short_to_prometheus_name("flushes")
        'invocation_scheduler_flushes_total'
    """
    return SHORT_METRIC_MAPPING.get(short_name, f"{METRIC_PREFIX}_{short_name}_total")


__all__ = [
    "CALLBACK_ERRORS_TOTAL",
    "CANCELLATIONS_TOTAL",
    "DEFERRAL_BUCKETS",
    "DEFERRAL_SECONDS",
    "DROPPED_TRIGGERS_TOTAL",
    "EDGES",
    "EDGE_COMPLETE",
    "EDGE_FLUSH",
    "EDGE_INTERVAL",
    "EDGE_LEADING",
    "EDGE_MAX_WAIT",
    "EDGE_TICK",
    "EDGE_TRAILING",
    "FLUSHES_TOTAL",
    "INVOCATIONS_TOTAL",
    "METRIC_PREFIX",
    "PENDING_SCHEDULERS",
    "SHORT_METRIC_MAPPING",
    "TRIGGERS_TOTAL",
    "short_to_prometheus_name",
]
