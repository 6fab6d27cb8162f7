"""Resource registry - declared resources loaded through a bounded queue.

This module provides:
- register(): Declare (or redeclare) a resource under an id
- load(): Cached-or-queued load with retry and exponential backoff
- get_stats(): Aggregate status snapshot
- preload_critical(): Parallel load of every critical descriptor
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from shopfront import state
from shopfront.budget import PerformanceBudget
from shopfront.clock import Clock, SystemClock
from shopfront.duration import parse_duration, to_seconds
from shopfront.errors import InvalidArgument, NotFoundError, TransientFetchError
from shopfront.loaders.base import Fetched, ResourceLoader
from shopfront.monitor import measure
from shopfront.queue import LoadingQueue
from shopfront.types import (
    Duration,
    Priority,
    ResourceDescriptor,
    ResourceEntry,
    ResourceKind,
    ResourceStats,
    ResourceStatus,
)

logger = logging.getLogger(__name__)

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9]")


def resource_id(descriptor: ResourceDescriptor) -> str:
    """Deterministic id for a descriptor, derived from its kind and url."""
    return f"{descriptor.kind.value}-{_UNSAFE_ID_CHARS.sub('-', descriptor.url)}"


@dataclass(frozen=True, slots=True)
class PreloadResult:
    """Outcome of one critical preload."""

    id: str
    data: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResourceRegistry:
    """Registered resources plus the queue that loads them."""

    def __init__(
        self,
        loaders: Mapping[ResourceKind, ResourceLoader],
        *,
        max_concurrent: int = 3,
        fetch_timeout: Duration = "10s",
        backoff_base: Duration = "1s",
        slow_threshold: Duration = "1s",
        clock: Clock | None = None,
        budget: PerformanceBudget | None = None,
    ) -> None:
        self._loaders = dict(loaders)
        self._queue = LoadingQueue(max_concurrent=max_concurrent)
        self._fetch_timeout = to_seconds(fetch_timeout)
        self._backoff_base = to_seconds(backoff_base)
        self._slow_threshold = parse_duration(slow_threshold)
        self._clock = clock or SystemClock()
        self._budget = budget
        self._entries: dict[str, ResourceEntry] = {}
        self._entry_loaders: dict[str, ResourceLoader] = {}
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def queue(self) -> LoadingQueue:
        return self._queue

    def register(self, resource_id: str, descriptor: ResourceDescriptor) -> ResourceEntry:
        """Create or replace the entry for ``resource_id`` in ``pending`` state.

        A load already running for a replaced entry keeps going and settles
        its own callers, but later loads start from the new descriptor.
        """
        loader = self._loaders.get(descriptor.kind)
        if loader is None:
            raise InvalidArgument(f"No loader for resource kind {descriptor.kind.value!r}")

        entry = ResourceEntry(id=resource_id, descriptor=descriptor)
        self._entries[resource_id] = entry
        self._entry_loaders[resource_id] = loader
        self._in_flight.pop(resource_id, None)
        return entry

    def get_entry(self, resource_id: str) -> ResourceEntry:
        try:
            return self._entries[resource_id]
        except KeyError:
            raise NotFoundError(resource_id) from None

    def ids(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._entries

    async def load(self, resource_id: str) -> Any:
        """Return the resource's data, loading it if needed.

        Fresh ``loaded`` entries are served without any network call.
        Concurrent loads of the same id share one queued load. Cancelling
        the awaiting caller does not cancel that shared load.
        """
        entry = self.get_entry(resource_id)

        if entry.status is ResourceStatus.LOADED and not self._is_expired(entry):
            return entry.data

        if self._closed:
            raise RuntimeError("ResourceRegistry is closed")

        task = self._in_flight.get(resource_id)
        if task is None:
            task = asyncio.create_task(self._drive(entry, self._entry_loaders[resource_id]))
            self._in_flight[resource_id] = task
            self._tasks.add(task)
            task.add_done_callback(lambda t: self._forget(resource_id, t))
        return await asyncio.shield(task)

    def _forget(self, resource_id: str, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if self._in_flight.get(resource_id) is task:
            del self._in_flight[resource_id]
        # Mark the outcome as retrieved even if every caller went away
        if not task.cancelled():
            task.exception()

    def _is_expired(self, entry: ResourceEntry) -> bool:
        if entry.descriptor.ttl is None:
            return False
        ttl = parse_duration(entry.descriptor.ttl)
        if not ttl:
            return False
        return self._clock.now_ms() - entry.last_loaded_at > ttl

    async def _drive(self, entry: ResourceEntry, loader: ResourceLoader) -> Any:
        """Queue attempts for ``entry`` until one succeeds or retries run out."""
        state.rearm(entry)
        while True:
            try:
                return await self._queue.submit(lambda: self._attempt(entry, loader))
            except TransientFetchError as e:
                decision = state.fail(entry)
                if decision is state.RetryDecision.GIVE_UP:
                    logger.error("Failed to load resource %s: %s", entry.id, e.reason)
                    raise TransientFetchError(
                        entry.id, entry.error_count, e.reason
                    ) from e.__cause__

                delay = state.backoff_delay(entry.error_count, self._backoff_base)
                logger.warning(
                    "Retrying resource %s in %.1fs (attempt %d failed: %s)",
                    entry.id,
                    delay,
                    entry.error_count,
                    e.reason,
                )
                await self._clock.sleep(delay)

    async def _attempt(self, entry: ResourceEntry, loader: ResourceLoader) -> Any:
        """One fetch of ``entry``; any failure surfaces as TransientFetchError."""
        state.start(entry)
        url = entry.descriptor.url
        try:
            measured = await measure(
                entry.id,
                lambda: self._with_timeout(loader.attempt_load(url)),
                slow_threshold=self._slow_threshold,
                clock=self._clock,
            )
        except asyncio.TimeoutError as e:
            raise TransientFetchError(
                entry.id, entry.error_count + 1, f"timed out after {self._fetch_timeout}s"
            ) from e
        except Exception as e:
            raise TransientFetchError(entry.id, entry.error_count + 1, str(e) or repr(e)) from e

        fetched: Fetched = measured.result
        state.succeed(entry, fetched.data, measured.duration_ms, self._clock.now_ms())
        if self._budget is not None:
            self._budget.track(url, fetched.size)
        return fetched.data

    async def _with_timeout(self, fetch: Awaitable[Fetched]) -> Fetched:
        """Await ``fetch``, cancelling it once ``fetch_timeout`` passes on the clock."""
        task = asyncio.ensure_future(fetch)
        expired = False

        def expire() -> None:
            nonlocal expired
            if not task.done():
                expired = True
                task.cancel()

        handle = self._clock.call_later(self._fetch_timeout, expire)
        try:
            return await task
        except asyncio.CancelledError:
            if expired:
                raise asyncio.TimeoutError from None
            raise
        finally:
            handle.cancel()

    def get_stats(self) -> ResourceStats:
        counts = dict.fromkeys(ResourceStatus, 0)
        total_load_time = 0.0
        for entry in self._entries.values():
            counts[entry.status] += 1
            if entry.status is ResourceStatus.LOADED:
                total_load_time += entry.load_duration_ms

        loaded = counts[ResourceStatus.LOADED]
        return ResourceStats(
            total=len(self._entries),
            loaded=loaded,
            loading=counts[ResourceStatus.LOADING],
            error=counts[ResourceStatus.ERROR],
            pending=counts[ResourceStatus.PENDING],
            average_load_time_ms=total_load_time / loaded if loaded else 0.0,
            total_load_time_ms=total_load_time,
        )

    async def preload_critical(
        self, descriptors: Iterable[ResourceDescriptor]
    ) -> list[PreloadResult]:
        """Register and load every critical descriptor in parallel.

        Waits for all of them; a failure is reported in its result and does
        not abort the others.
        """
        ids = []
        for descriptor in descriptors:
            if descriptor.priority is not Priority.CRITICAL:
                continue
            rid = resource_id(descriptor)
            self.register(rid, descriptor)
            ids.append(rid)

        outcomes = await asyncio.gather(
            *(self.load(rid) for rid in ids), return_exceptions=True
        )
        results = []
        for rid, outcome in zip(ids, outcomes):
            if isinstance(outcome, BaseException):
                results.append(PreloadResult(id=rid, error=outcome))
            else:
                results.append(PreloadResult(id=rid, data=outcome))
        return results

    async def aclose(self) -> None:
        """Cancel pending loads and backoff timers."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await self._queue.aclose()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._in_flight.clear()
