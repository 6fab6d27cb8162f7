"""Resource entry state machine and retry schedule.

Transitions::

    pending --start--> loading --succeed--> loaded
                          |
                          +--fail--> error --start--> loading   (retries left)

``loaded`` and ``error`` return to ``pending`` only through re-registration,
which creates a fresh entry.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from shopfront.types import ResourceEntry, ResourceStatus

_ALLOWED_STARTS = frozenset(
    {ResourceStatus.PENDING, ResourceStatus.ERROR, ResourceStatus.LOADED}
)


class RetryDecision(str, Enum):
    RETRY = "retry"
    GIVE_UP = "give_up"


class InvalidTransition(RuntimeError):
    """An entry was driven along an edge the state machine does not have."""


def start(entry: ResourceEntry) -> None:
    """Mark an attempt as executing. Expired ``loaded`` entries may reload."""
    if entry.status not in _ALLOWED_STARTS:
        raise InvalidTransition(f"cannot start {entry.id!r} from {entry.status.value}")
    entry.status = ResourceStatus.LOADING


def succeed(entry: ResourceEntry, data: Any, duration_ms: float, now_ms: int) -> None:
    if entry.status is not ResourceStatus.LOADING:
        raise InvalidTransition(f"cannot complete {entry.id!r} from {entry.status.value}")
    entry.status = ResourceStatus.LOADED
    entry.data = data
    entry.load_duration_ms = duration_ms
    entry.last_loaded_at = now_ms
    entry.error_count = 0


def fail(entry: ResourceEntry) -> RetryDecision:
    """Record a failed attempt and decide whether another one is allowed."""
    if entry.status is not ResourceStatus.LOADING:
        raise InvalidTransition(f"cannot fail {entry.id!r} from {entry.status.value}")
    entry.status = ResourceStatus.ERROR
    entry.error_count += 1
    if entry.error_count < entry.descriptor.max_retries:
        return RetryDecision.RETRY
    return RetryDecision.GIVE_UP


def backoff_delay(error_count: int, base: float = 1.0) -> float:
    """Seconds to wait after the ``error_count``-th failure: ``base * 2**n``."""
    return base * 2**error_count


def rearm(entry: ResourceEntry) -> None:
    """Give a caller's fresh request on a failed entry a full retry budget."""
    if entry.status is ResourceStatus.ERROR:
        entry.error_count = 0
