# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the invocation scheduler library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from SchedulerError, making it easy to catch
all scheduler-related exceptions with a single except clause.
"""


class SchedulerError(Exception):
    """Base exception for all scheduler errors.

    This is the root exception class for the invocation scheduler library.
    Catch this exception to handle any error originating from the library.

    Example:
        try:
            scheduler.pause()
        except SchedulerError as e:
            logger.error(f"Scheduler error: {e}")
    """

    pass


class ConfigurationError(SchedulerError):
    """Raised when configuration is invalid.

    This exception is raised synchronously at construction time when the
    provided configuration values are invalid or incompatible. It is never
    retried.

    Common causes include:
    - Negative delay
    - max_wait shorter than delay
    - max_wait given for a mode that has no burst to bound
    - Non-positive countdown tick interval
    - Unknown mode name

    Example:
        try:
            config = SchedulerConfig(delay=0.5, max_wait=0.1)
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
    """

    pass


class MisuseError(SchedulerError):
    """Raised when an operation is not valid for the scheduler's mode or state.

    Examples are calling pause(), resume() or remaining on a debounce or
    throttle scheduler, or triggering a scheduler that has been closed.
    The scheduler state is never mutated when this is raised.

    Attributes:
        operation: Name of the rejected operation, if known.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class CallbackError(SchedulerError):
    """Raised when the consumer callback fails on the timer-fire path.

    Failures of the callback during trigger() or flush() propagate unchanged
    to the caller. When the callback runs from a timer fire there is no
    caller, so the failure is wrapped in this exception and raised to the
    timer source, which hands it to its host (thread excepthook, event loop
    exception handler, or the test driving a manual clock).

    The scheduler's own state has already been finalized when this is
    raised; the invocation is not retried.

    Attributes:
        scheduler_name: Name of the scheduler whose callback failed.
        original: The exception raised by the callback.

    Example:
        source = ThreadingTimerSource(error_handler=report)

        def report(exc: BaseException) -> None:
            if isinstance(exc, CallbackError):
                logger.error(f"{exc.scheduler_name} failed: {exc.original!r}")
    """

    def __init__(
        self,
        message: str,
        scheduler_name: str | None = None,
        original: BaseException | None = None,
    ):
        super().__init__(message)
        self.scheduler_name = scheduler_name
        self.original = original


__all__ = [
    "CallbackError",
    "ConfigurationError",
    "MisuseError",
    "SchedulerError",
]
