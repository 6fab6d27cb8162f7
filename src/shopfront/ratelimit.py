"""Throttle and debounce combinators over an injectable clock."""

from __future__ import annotations

from collections.abc import Callable
from functools import update_wrapper
from typing import Any, Generic, ParamSpec, TypeVar

from shopfront.clock import Clock, SystemClock, TimerHandle
from shopfront.duration import to_seconds
from shopfront.types import Duration

P = ParamSpec("P")
R = TypeVar("R")


class Throttle(Generic[P, R]):
    """Leading-edge throttle.

    The first call runs immediately; further calls within ``interval`` of
    the last accepted call are dropped and return ``None``. The most recent
    dropped call is remembered: ``flush()`` runs it on demand, and with
    ``trailing=True`` it also runs once the interval has passed.
    """

    def __init__(
        self,
        fn: Callable[P, R],
        interval: Duration,
        *,
        trailing: bool = False,
        clock: Clock | None = None,
    ) -> None:
        self._fn = fn
        self._interval = to_seconds(interval)
        self._trailing = trailing
        self._clock = clock or SystemClock()
        self._last_call: float | None = None
        self._dropped: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._handle: TimerHandle | None = None
        update_wrapper(self, fn)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R | None:
        now = self._clock.monotonic()
        if self._last_call is not None and now - self._last_call < self._interval:
            self._dropped = (args, kwargs)
            if self._trailing and self._handle is None:
                remaining = self._interval - (now - self._last_call)
                self._handle = self._clock.call_later(remaining, self.flush)
            return None
        self._cancel_trailing()
        self._dropped = None
        self._last_call = now
        return self._fn(*args, **kwargs)

    @property
    def pending(self) -> bool:
        """Whether a dropped call is waiting to be flushed."""
        return self._dropped is not None

    def flush(self) -> R | None:
        """Run the most recent dropped call now. Returns ``None`` if there is none."""
        self._cancel_trailing()
        if self._dropped is None:
            return None
        args, kwargs = self._dropped
        self._dropped = None
        self._last_call = self._clock.monotonic()
        return self._fn(*args, **kwargs)

    def reset(self) -> None:
        """Forget the last call so the next one runs immediately."""
        self._cancel_trailing()
        self._dropped = None
        self._last_call = None

    def _cancel_trailing(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Debounce(Generic[P]):
    """Trailing-edge debounce.

    Each call replaces the pending invocation; ``fn`` runs once ``wait``
    has passed without another call. Needs a running event loop when used
    with ``SystemClock``.
    """

    def __init__(
        self,
        fn: Callable[P, Any],
        wait: Duration,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._fn = fn
        self._wait = to_seconds(wait)
        self._clock = clock or SystemClock()
        self._handle: TimerHandle | None = None
        update_wrapper(self, fn)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> None:
        self.cancel()
        self._handle = self._clock.call_later(self._wait, self._fire, args, kwargs)

    def _fire(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        self._handle = None
        self._fn(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


def throttle(
    interval: Duration, *, trailing: bool = False, clock: Clock | None = None
) -> Callable[[Callable[P, R]], Throttle[P, R]]:
    """Decorator form of ``Throttle``."""

    def decorator(fn: Callable[P, R]) -> Throttle[P, R]:
        return Throttle(fn, interval, trailing=trailing, clock=clock)

    return decorator


def debounce(
    wait: Duration, *, clock: Clock | None = None
) -> Callable[[Callable[P, Any]], Debounce[P]]:
    """Decorator form of ``Debounce``."""

    def decorator(fn: Callable[P, Any]) -> Debounce[P]:
        return Debounce(fn, wait, clock=clock)

    return decorator
