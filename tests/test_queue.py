"""Tests for the bounded loading queue."""

import asyncio

import pytest

from shopfront import LoadingQueue


class TestLoadingQueue:
    """Tests for LoadingQueue."""

    async def test_submit_returns_job_result(self) -> None:
        queue = LoadingQueue()

        async def job() -> str:
            return "done"

        assert await queue.submit(job) == "done"
        assert queue.in_flight == 0

    async def test_job_exception_settles_future(self) -> None:
        queue = LoadingQueue()

        async def job() -> str:
            raise ValueError("bad payload")

        with pytest.raises(ValueError, match="bad payload"):
            await queue.submit(job)
        assert queue.in_flight == 0

    async def test_bounded_concurrency(self) -> None:
        queue = LoadingQueue(max_concurrent=2)
        release = asyncio.Event()
        running = 0
        seen_max = 0

        async def job() -> None:
            nonlocal running, seen_max
            running += 1
            seen_max = max(seen_max, running)
            await release.wait()
            running -= 1

        futures = [queue.submit(job) for _ in range(6)]
        await asyncio.sleep(0)
        assert queue.in_flight == 2
        assert queue.pending == 4

        release.set()
        await asyncio.gather(*futures)
        assert seen_max == 2
        assert queue.peak_in_flight == 2

    async def test_completion_order_is_unordered(self) -> None:
        queue = LoadingQueue(max_concurrent=2)
        finished: list[str] = []
        slow_gate = asyncio.Event()

        async def slow() -> None:
            await slow_gate.wait()
            finished.append("slow")

        async def fast() -> None:
            finished.append("fast")
            slow_gate.set()

        await asyncio.gather(queue.submit(slow), queue.submit(fast))
        assert finished == ["fast", "slow"]

    def test_rejects_non_positive_concurrency(self) -> None:
        with pytest.raises(ValueError):
            LoadingQueue(max_concurrent=0)

    async def test_aclose_cancels_queued_and_running(self) -> None:
        queue = LoadingQueue(max_concurrent=1)
        never = asyncio.Event()

        async def job() -> None:
            await never.wait()

        running = queue.submit(job)
        queued = queue.submit(job)
        await asyncio.sleep(0)

        await queue.aclose()
        assert running.cancelled()
        assert queued.cancelled()
        with pytest.raises(RuntimeError, match="closed"):
            queue.submit(job)
