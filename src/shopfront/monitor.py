"""Operation timing."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from shopfront.clock import Clock, SystemClock
from shopfront.duration import parse_duration
from shopfront.types import Duration

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Measurement(Generic[T]):
    """Result of a timed operation."""

    result: T
    duration_ms: float


async def measure(
    name: str,
    fn: Callable[[], Awaitable[T]],
    *,
    slow_threshold: Duration = "1s",
    clock: Clock | None = None,
) -> Measurement[T]:
    """Await ``fn()`` and report how long it took.

    Exceptions from ``fn`` propagate unchanged; only successful runs are
    measured.
    """
    clock = clock or SystemClock()
    start = clock.monotonic()
    result = await fn()
    duration_ms = (clock.monotonic() - start) * 1000

    logger.debug("%s took %.2fms", name, duration_ms)
    if duration_ms > parse_duration(slow_threshold):
        logger.warning("Slow operation: %s (%.2fms)", name, duration_ms)

    return Measurement(result=result, duration_ms=duration_ms)
