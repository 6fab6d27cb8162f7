"""Application context - the explicitly constructed delivery stack.

One ``DeliveryContext`` per application (or per test) replaces module-level
singletons. It owns the periodic cache cleanup timer and, when it created
it, the HTTP client; ``aclose()`` releases both.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from shopfront.adaptive import AdaptivePolicy
from shopfront.budget import PerformanceBudget
from shopfront.capabilities import CapabilityDetector, HintSource
from shopfront.clock import Clock, SystemClock
from shopfront.loaders.base import ResourceLoader
from shopfront.loaders.http import build_http_loaders
from shopfront.registry import ResourceRegistry
from shopfront.request_cache import RequestCache
from shopfront.types import Capabilities, Duration, ImageQuality, ResourceKind


@dataclass
class DeliveryContext:
    """Capabilities, policy, cache, budget and registry for one app."""

    capabilities: Capabilities
    policy: AdaptivePolicy
    cache: RequestCache
    budget: PerformanceBudget
    registry: ResourceRegistry
    _client: httpx.AsyncClient | None = None

    def image_quality(self) -> ImageQuality:
        return self.policy.image_quality(self.capabilities)

    def optimal_image_pixel_width(self) -> int:
        return self.policy.optimal_image_pixel_width(self.capabilities)

    def should_load_component(self, name: str) -> bool:
        return self.policy.should_load_component(name, self.capabilities)

    async def aclose(self) -> None:
        """Stop the cleanup timer, cancel pending loads, close owned clients."""
        await self.cache.close()
        await self.registry.aclose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> DeliveryContext:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def create_context(
    *,
    hints: HintSource | Mapping[str, Any] | None = None,
    client: httpx.AsyncClient | None = None,
    loaders: Mapping[ResourceKind, ResourceLoader] | None = None,
    max_concurrent: int = 3,
    fetch_timeout: Duration = "10s",
    backoff_base: Duration = "1s",
    cache_ttl: Duration = "5m",
    cache_max_items: int | None = None,
    cleanup_interval: Duration | None = "5m",
    budgets: Mapping[str, int] | None = None,
    clock: Clock | None = None,
) -> DeliveryContext:
    """Create a delivery context.

    Must be called from a running event loop when ``cleanup_interval`` is
    set, since the periodic cache cleanup is started immediately.

    Args:
        hints: Capability hints, or a callable returning them
        client: Shared HTTP client (created and owned here if omitted)
        loaders: Per-kind loaders (default: HTTP loaders over ``client``)
        max_concurrent: Loads allowed in flight at once
        fetch_timeout: Per-attempt timeout
        backoff_base: Retry delay unit, doubled per failure
        cache_ttl: Default request cache TTL
        cache_max_items: Optional LRU bound for the request cache
        cleanup_interval: Period of cache cleanup (None disables it)
        budgets: Overrides for the performance budgets, in bytes
        clock: Time source (default: real time)

    Returns:
        DeliveryContext with capabilities snapshotted once
    """
    clock = clock or SystemClock()

    owned_client = None
    if loaders is None:
        if client is None:
            client = owned_client = httpx.AsyncClient(follow_redirects=True)
        loaders = build_http_loaders(client)

    cache = RequestCache(default_ttl=cache_ttl, max_items=cache_max_items, clock=clock)
    budget = PerformanceBudget(budgets)
    registry = ResourceRegistry(
        loaders,
        max_concurrent=max_concurrent,
        fetch_timeout=fetch_timeout,
        backoff_base=backoff_base,
        clock=clock,
        budget=budget,
    )

    if cleanup_interval is not None:
        cache.start_cleanup(cleanup_interval)

    return DeliveryContext(
        capabilities=CapabilityDetector(hints).detect(),
        policy=AdaptivePolicy(),
        cache=cache,
        budget=budget,
        registry=registry,
        _client=owned_client,
    )
