"""Clock and timer abstraction.

Everything time-dependent in shopfront (TTL expiry, backoff delays,
throttling, periodic cleanup) goes through a ``Clock`` so tests can drive
it without wall-clock sleeps.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None:
        """Cancel the callback if it has not run yet."""
        ...


@runtime_checkable
class Clock(Protocol):
    """Time source and scheduler."""

    def monotonic(self) -> float:
        """Seconds from an arbitrary origin, never going backwards."""
        ...

    def now_ms(self) -> int:
        """Current wall time as a Unix timestamp in milliseconds."""
        ...

    async def sleep(self, delay: float) -> None:
        """Suspend the caller for ``delay`` seconds."""
        ...

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle:
        """Run ``callback(*args)`` after ``delay`` seconds."""
        ...


class SystemClock:
    """Real time, backed by the running asyncio loop."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    async def sleep(self, delay: float) -> None:
        await asyncio.sleep(delay)

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback, *args)


class _ManualTimer:
    __slots__ = ("_cancelled", "args", "callback", "when")

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualClock:
    """Deterministic clock for tests and simulations.

    Time only moves through ``advance()``. With ``auto_advance=True``
    (the default) ``sleep()`` advances time by the requested delay and
    returns on the next loop iteration, so backoff schedules can be
    asserted through ``sleeps`` without waiting.
    """

    def __init__(self, start: float = 0.0, *, auto_advance: bool = True) -> None:
        self._now = start
        self._auto_advance = auto_advance
        self._timers: list[tuple[float, int, _ManualTimer]] = []
        self._seq = itertools.count()
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self._now

    def now_ms(self) -> int:
        return int(self._now * 1000)

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        if self._auto_advance:
            self.advance(delay)
            await asyncio.sleep(0)
            return

        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        timer = self.call_later(delay, _resolve, future)
        try:
            await future
        finally:
            timer.cancel()

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> _ManualTimer:
        timer = _ManualTimer(self._now + delay, callback, args)
        heapq.heappush(self._timers, (timer.when, next(self._seq), timer))
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every timer that comes due in order."""
        target = self._now + seconds
        while self._timers and self._timers[0][0] <= target:
            when, _, timer = heapq.heappop(self._timers)
            if timer.cancelled():
                continue
            self._now = max(self._now, when)
            timer.callback(*timer.args)
        self._now = target

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, timer in self._timers if not timer.cancelled())


def _resolve(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)
