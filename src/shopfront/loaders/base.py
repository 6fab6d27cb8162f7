"""Base loader protocol for resource kinds."""

from typing import Any, NamedTuple, Protocol, runtime_checkable


class Fetched(NamedTuple):
    """Payload of a successful load and the bytes it cost to transfer."""

    data: Any
    size: int = 0


@runtime_checkable
class ResourceLoader(Protocol):
    """Loads one kind of resource from a URL."""

    async def attempt_load(self, url: str) -> Fetched:
        """Fetch ``url`` once. Raises on any failure; never retries."""
        ...
