"""Bounded-concurrency FIFO loading queue."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")

Job = Callable[[], Awaitable[Any]]


class LoadingQueue:
    """Run submitted jobs in arrival order, at most ``max_concurrent`` at once.

    Jobs start in FIFO order but may finish in any order. Every mutation of
    the queue and the in-flight counter happens synchronously between
    awaits, so no lock is needed on a single event loop.
    """

    def __init__(self, *, max_concurrent: int = 3) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._max_concurrent = max_concurrent
        self._queue: deque[tuple[Job, asyncio.Future[Any]]] = deque()
        self._in_flight = 0
        self._peak_in_flight = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Highest number of jobs that ever ran at the same time."""
        return self._peak_in_flight

    @property
    def pending(self) -> int:
        return len(self._queue)

    def submit(self, job: Callable[[], Awaitable[T]]) -> asyncio.Future[T]:
        """Enqueue ``job`` at the back; the future settles with its outcome."""
        if self._closed:
            raise RuntimeError("LoadingQueue is closed")
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._queue.append((job, future))
        self._drain()
        return future

    def _drain(self) -> None:
        while self._queue and self._in_flight < self._max_concurrent:
            job, future = self._queue.popleft()
            if future.done():  # Cancelled while waiting
                continue
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
            task = asyncio.create_task(self._run(job, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, job: Job, future: asyncio.Future[Any]) -> None:
        try:
            result = await job()
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            raise
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._in_flight -= 1
            if not self._closed:
                self._drain()

    async def aclose(self) -> None:
        """Cancel queued and running jobs."""
        self._closed = True
        while self._queue:
            _, future = self._queue.popleft()
            future.cancel()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
