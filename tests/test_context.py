"""Integration tests for the delivery context."""

import httpx
import respx

from shopfront import (
    ConnectionTier,
    ImageQuality,
    ManualClock,
    ResourceDescriptor,
    ResourceKind,
    create_context,
)


class TestCreateContext:
    """Tests for create_context()."""

    async def test_snapshots_capabilities_and_policy(self) -> None:
        ctx = create_context(
            hints={"effective_type": "3g", "device_memory": 8},
            clock=ManualClock(auto_advance=False),
        )
        async with ctx:
            assert ctx.capabilities.connection_tier is ConnectionTier.MEDIUM
            assert ctx.image_quality() is ImageQuality.MEDIUM
            assert ctx.optimal_image_pixel_width() == 800
            assert ctx.should_load_component("reviews")

    async def test_aclose_stops_cleanup_timer(self) -> None:
        ctx = create_context(clock=ManualClock(auto_advance=False))
        assert ctx.cache.cleanup_running

        await ctx.aclose()
        assert not ctx.cache.cleanup_running

    async def test_cleanup_can_be_disabled(self) -> None:
        async with create_context(cleanup_interval=None) as ctx:
            assert not ctx.cache.cleanup_running

    @respx.mock
    async def test_loads_through_http_and_tracks_budget(self) -> None:
        respx.get("https://shop.test/api/categories").mock(
            return_value=httpx.Response(200, json=[{"slug": "shoes"}])
        )
        respx.get("https://shop.test/hero.png").mock(
            return_value=httpx.Response(
                200, content=b"\x89PNG", headers={"content-type": "image/png"}
            )
        )

        async with httpx.AsyncClient() as client:
            async with create_context(client=client, cleanup_interval=None) as ctx:
                ctx.registry.register(
                    "categories",
                    ResourceDescriptor(
                        url="https://shop.test/api/categories", kind=ResourceKind.DATA
                    ),
                )
                results = await ctx.registry.preload_critical(
                    [
                        ResourceDescriptor(
                            url="https://shop.test/hero.png",
                            kind="image",
                            priority="critical",
                        )
                    ]
                )

                assert await ctx.registry.load("categories") == [{"slug": "shoes"}]
                assert results[0].data == b"\x89PNG"
                assert ctx.budget.report().metrics["images"] == 4
                assert ctx.registry.get_stats().loaded == 2

            assert not client.is_closed  # caller-owned client is left open
