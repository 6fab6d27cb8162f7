"""Adaptive delivery policy driven by detected capabilities."""

from collections.abc import Iterable

from shopfront.types import Capabilities, ComponentPriority, ConnectionTier, ImageQuality

DEFAULT_CRITICAL_COMPONENTS = frozenset({"header", "navigation", "hero"})
DEFAULT_IMPORTANT_COMPONENTS = frozenset({"stories", "products-grid"})

_IMAGE_WIDTHS: dict[ConnectionTier, int] = {
    ConnectionTier.SLOW: 400,
    ConnectionTier.MEDIUM: 800,
    ConnectionTier.FAST: 1200,
}


class AdaptivePolicy:
    """Decide image quality, image width and which components load.

    Pure and deterministic: every decision is a function of the
    ``Capabilities`` passed in.
    """

    def __init__(
        self,
        *,
        critical_components: Iterable[str] = DEFAULT_CRITICAL_COMPONENTS,
        important_components: Iterable[str] = DEFAULT_IMPORTANT_COMPONENTS,
    ) -> None:
        self._critical = frozenset(critical_components)
        self._important = frozenset(important_components)

    def image_quality(self, caps: Capabilities) -> ImageQuality:
        """First matching rule wins: slow or <2 GiB, then medium or <4 GiB."""
        if caps.connection_tier is ConnectionTier.SLOW or caps.device_memory_gib < 2:
            return ImageQuality.LOW
        if caps.connection_tier is ConnectionTier.MEDIUM or caps.device_memory_gib < 4:
            return ImageQuality.MEDIUM
        return ImageQuality.HIGH

    def optimal_image_pixel_width(self, caps: Capabilities) -> int:
        return _IMAGE_WIDTHS[caps.connection_tier]

    def component_priority(self, name: str) -> ComponentPriority:
        if name in self._critical:
            return ComponentPriority.CRITICAL
        if name in self._important:
            return ComponentPriority.IMPORTANT
        return ComponentPriority.OPTIONAL

    def should_load_component(self, name: str, caps: Capabilities) -> bool:
        """Critical components always load; others only off slow links."""
        if self.component_priority(name) is ComponentPriority.CRITICAL:
            return True
        return caps.connection_tier is not ConnectionTier.SLOW
