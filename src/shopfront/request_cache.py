"""In-memory request cache with TTLs and periodic cleanup."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Any

from shopfront.clock import Clock, SystemClock
from shopfront.duration import parse_duration, to_seconds
from shopfront.types import CacheRecord, Duration

logger = logging.getLogger(__name__)


class RequestCache:
    """TTL-keyed memoization store with optional LRU eviction.

    Best-effort only: expired records are logically absent and are removed
    lazily by ``get()`` or in bulk by ``cleanup()``.
    """

    def __init__(
        self,
        *,
        default_ttl: Duration = "5m",
        max_items: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._records: OrderedDict[str, CacheRecord] = OrderedDict()
        self._default_ttl = parse_duration(default_ttl)
        self._max_items = max_items
        self._clock = clock or SystemClock()
        self._cleanup_task: asyncio.Task[None] | None = None

    def set(self, key: str, value: Any, ttl: Duration | None = None) -> None:
        """Store a value, overwriting any existing record for ``key``."""
        record = CacheRecord(
            key=key,
            value=value,
            inserted_at=self._clock.now_ms(),
            ttl=parse_duration(ttl) if ttl is not None else self._default_ttl,
        )
        self._records[key] = record
        self._records.move_to_end(key)
        if self._max_items and len(self._records) > self._max_items:
            evicted, _ = self._records.popitem(last=False)
            logger.debug("Evicted least recently used cache key %r", evicted)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or ``default`` if missing or expired."""
        record = self._records.get(key)
        if record is None:
            return default
        if record.is_expired(self._clock.now_ms()):
            del self._records[key]
            return default
        self._records.move_to_end(key)  # LRU touch
        return record.value

    def delete(self, key: str) -> None:
        self._records.pop(key, None)

    def clear(self) -> None:
        self._records.clear()

    def cleanup(self) -> int:
        """Evict every expired record. Returns how many were removed."""
        now = self._clock.now_ms()
        expired = [key for key, record in self._records.items() if record.is_expired(now)]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug("Request cache cleanup evicted %d record(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        record = self._records.get(key)  # type: ignore[arg-type]
        return record is not None and not record.is_expired(self._clock.now_ms())

    # -------------------------------------------------------------------------
    # Periodic cleanup
    # -------------------------------------------------------------------------

    def start_cleanup(self, interval: Duration = "5m") -> asyncio.Task[None]:
        """Run ``cleanup()`` every ``interval`` until ``close()`` is called."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return self._cleanup_task

        delay = to_seconds(interval)
        if delay <= 0:
            raise ValueError("cleanup interval must be positive")

        async def run() -> None:
            while True:
                await self._clock.sleep(delay)
                self.cleanup()

        self._cleanup_task = asyncio.create_task(run())
        return self._cleanup_task

    @property
    def cleanup_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    async def close(self) -> None:
        """Cancel the periodic cleanup timer."""
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
