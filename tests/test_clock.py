"""Tests for the clock abstraction."""

import asyncio

import pytest

from shopfront import Clock, ManualClock, SystemClock


class TestManualClock:
    """Tests for ManualClock."""

    def test_advance_fires_timers_in_order(self) -> None:
        clock = ManualClock()
        fired: list[tuple[str, float]] = []
        clock.call_later(2, lambda: fired.append(("b", clock.monotonic())))
        clock.call_later(1, lambda: fired.append(("a", clock.monotonic())))
        clock.call_later(5, lambda: fired.append(("c", clock.monotonic())))

        clock.advance(3)
        assert fired == [("a", 1), ("b", 2)]
        assert clock.monotonic() == 3
        assert clock.pending_timers == 1

    def test_cancelled_timer_does_not_fire(self) -> None:
        clock = ManualClock()
        fired: list[str] = []
        handle = clock.call_later(1, fired.append, "x")
        handle.cancel()
        clock.advance(2)
        assert fired == []

    async def test_auto_advance_sleep(self) -> None:
        clock = ManualClock(start=10)
        await clock.sleep(4)
        assert clock.monotonic() == 14
        assert clock.now_ms() == 14_000
        assert clock.sleeps == [4]

    async def test_manual_sleep_waits_for_advance(self) -> None:
        clock = ManualClock(auto_advance=False)
        task = asyncio.create_task(clock.sleep(1))
        await asyncio.sleep(0)
        assert not task.done()

        clock.advance(1)
        await task
        assert clock.sleeps == [1]

    async def test_cancelled_sleep_drops_its_timer(self) -> None:
        clock = ManualClock(auto_advance=False)
        task = asyncio.create_task(clock.sleep(1))
        await asyncio.sleep(0)
        assert clock.pending_timers == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert clock.pending_timers == 0


def test_both_clocks_satisfy_protocol() -> None:
    assert isinstance(SystemClock(), Clock)
    assert isinstance(ManualClock(), Clock)
