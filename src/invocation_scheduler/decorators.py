# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Decorator API for applying debounce and throttle behavior to functions."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, overload

from .config import SchedulerConfig
from .scheduler.scheduler import Scheduler
from .timers.base import BaseTimerSource

F = TypeVar("F", bound=Callable[..., Any])


def _wrap(fn: Callable[..., Any], config: SchedulerConfig, timer_source: BaseTimerSource | None) -> Any:
    if inspect.iscoroutinefunction(fn):
        raise TypeError(f"@{config.mode.value} does not support async functions.")

    scheduler = Scheduler(config, fn, timer_source=timer_source)

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        scheduler.trigger(*args, **kwargs)

    wrapper.scheduler = scheduler  # type: ignore[attr-defined]
    wrapper.cancel = scheduler.cancel  # type: ignore[attr-defined]
    wrapper.flush = scheduler.flush  # type: ignore[attr-defined]
    wrapper.status = scheduler.status  # type: ignore[attr-defined]
    wrapper.close = scheduler.close  # type: ignore[attr-defined]

    return wrapper


@overload
def debounce(
    func: F,
    /,
) -> F: ...


@overload
def debounce(
    *,
    delay: float = 0.3,
    leading: bool = False,
    trailing: bool = True,
    max_wait: float | None = None,
    timer_source: BaseTimerSource | None = None,
    name: str | None = None,
) -> Callable[[F], F]: ...


def debounce(
    func: F | None = None,
    /,
    *,
    delay: float = 0.3,
    leading: bool = False,
    trailing: bool = True,
    max_wait: float | None = None,
    timer_source: BaseTimerSource | None = None,
    name: str | None = None,
) -> F | Callable[[F], F]:
    """Decorator that debounces calls to a function.

    Calling the decorated function no longer runs it; each call is a
    trigger, and the original function runs with the arguments of the
    latest call once ``delay`` seconds pass without another call. The
    decorated function therefore always returns None.

    The wrapper exposes ``scheduler``, ``cancel()``, ``flush()``,
    ``status()`` and ``close()``.

    Args:
        func: The function to decorate (when used without parentheses).
        delay: Quiet-period delay in seconds.
        leading: Also run on the first call of a burst.
        trailing: Run after the quiet period.
        max_wait: Maximum deferral in seconds, or None for no limit.
        timer_source: Timer source to schedule on (threads by default).
        name: Scheduler name for logs and metrics (defaults to the
            function's qualified name).

    Examples:
    ```python
        @debounce(delay=0.5)
        def save(document: Document) -> None:
            document.write()

        save(doc)  # runs 0.5s after the last call
        save.flush()  # or right now
    ```
    """

    def decorator(fn: F) -> F:
        config = SchedulerConfig.debounce(
            delay,
            leading=leading,
            trailing=trailing,
            max_wait=max_wait,
            name=name or fn.__qualname__,
        )
        wrapper: F = _wrap(fn, config, timer_source)
        return wrapper

    if func is not None:
        return decorator(func)

    return decorator


@overload
def throttle(
    func: F,
    /,
) -> F: ...


@overload
def throttle(
    *,
    delay: float = 0.1,
    leading: bool = True,
    trailing: bool = True,
    timer_source: BaseTimerSource | None = None,
    name: str | None = None,
) -> Callable[[F], F]: ...


def throttle(
    func: F | None = None,
    /,
    *,
    delay: float = 0.1,
    leading: bool = True,
    trailing: bool = True,
    timer_source: BaseTimerSource | None = None,
    name: str | None = None,
) -> F | Callable[[F], F]:
    """Decorator that throttles calls to a function.

    The original function runs at most once per ``delay`` seconds: on the
    first call (``leading``) and, if calls arrived in between, once more at
    the end of the window with the latest arguments (``trailing``).

    The wrapper exposes the same helpers as :func:`debounce`.

    Examples:
    ```python
        @throttle(delay=0.1)
        def on_resize(width: int, height: int) -> None:
            layout(width, height)
    ```
    """

    def decorator(fn: F) -> F:
        config = SchedulerConfig.throttle(
            delay,
            leading=leading,
            trailing=trailing,
            name=name or fn.__qualname__,
        )
        wrapper: F = _wrap(fn, config, timer_source)
        return wrapper

    if func is not None:
        return decorator(func)

    return decorator


__all__ = ["debounce", "throttle"]
