"""Shared pytest fixtures."""

import asyncio
from collections.abc import Callable

import pytest

from shopfront import Fetched, ManualClock, ResourceKind, ResourceRegistry


class FakeLoader:
    """Loader that answers from a script of outcomes per URL.

    ``outcomes[url]`` is a list consumed one item per attempt: an exception
    instance is raised, anything else is returned as the payload. Once the
    list runs out the last outcome repeats.
    """

    def __init__(self, outcomes: dict[str, list[object]] | None = None) -> None:
        self.outcomes = outcomes or {}
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.active = 0
        self.max_active = 0

    async def attempt_load(self, url: str) -> Fetched:
        self.calls.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            script = self.outcomes.get(url, [f"payload:{url}"])
            outcome = script.pop(0) if len(script) > 1 else script[0]
            if isinstance(outcome, BaseException):
                raise outcome
            return Fetched(data=outcome, size=len(str(outcome)))
        finally:
            self.active -= 1


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock that advances on sleep()."""
    return ManualClock(start=1_000.0)


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def make_registry(
    loader: FakeLoader, clock: ManualClock
) -> Callable[..., ResourceRegistry]:
    """Build a registry where every kind uses the fake loader."""

    def factory(**kwargs: object) -> ResourceRegistry:
        loaders = {kind: loader for kind in ResourceKind}
        return ResourceRegistry(loaders, clock=clock, **kwargs)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def registry(make_registry: Callable[..., ResourceRegistry]) -> ResourceRegistry:
    return make_registry()
