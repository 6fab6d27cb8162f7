"""Virtualized list windowing.

Only the rows inside the viewport (plus ``overscan`` rows on each side)
are rendered; ``offset_y`` positions that slice inside a spacer of the
list's full height.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from shopfront.clock import Clock
from shopfront.errors import InvalidArgument
from shopfront.ratelimit import Throttle
from shopfront.types import Duration, VisibleWindow

T = TypeVar("T")

EMPTY_WINDOW = VisibleWindow(start_index=0, end_index=-1, offset_y=0)


def compute_window(
    scroll_top: float,
    container_height: float,
    item_height: float,
    total_items: int,
    overscan: int = 5,
) -> VisibleWindow:
    """Visible index range for a scroll position.

    ``scroll_top`` is clamped to the scrollable range first, the way a
    browser clamps ``scrollTop``, so an offset past the end of a list that
    shrank still yields its last rows.
    """
    if item_height <= 0:
        raise InvalidArgument(f"item_height must be positive, got {item_height}")
    if container_height < 0:
        raise InvalidArgument(f"container_height must be >= 0, got {container_height}")
    if overscan < 0:
        raise InvalidArgument(f"overscan must be >= 0, got {overscan}")
    if total_items <= 0:
        return EMPTY_WINDOW

    max_scroll = max(0.0, total_items * item_height - container_height)
    scroll_top = min(max(0.0, scroll_top), max_scroll)

    raw_start = math.floor(scroll_top / item_height)
    raw_end = raw_start + math.ceil(container_height / item_height)

    start_index = max(0, raw_start - overscan)
    end_index = min(total_items - 1, raw_end + overscan)
    return VisibleWindow(
        start_index=start_index,
        end_index=end_index,
        offset_y=start_index * item_height,
    )


class VirtualList(Generic[T]):
    """Scroll state for a long list of fixed-height rows."""

    def __init__(
        self,
        items: Sequence[T],
        *,
        item_height: float,
        container_height: float,
        overscan: int = 5,
        scroll_interval: Duration = "16ms",
        clock: Clock | None = None,
        on_scroll: Callable[[float], None] | None = None,
    ) -> None:
        self._items = items
        self._item_height = item_height
        self._container_height = container_height
        self._overscan = overscan
        self._scroll_top = 0.0
        self._on_scroll = on_scroll
        self._window = compute_window(
            0, container_height, item_height, len(items), overscan
        )
        self._throttled_scroll = Throttle(self._apply_scroll, scroll_interval, clock=clock)

    @property
    def window(self) -> VisibleWindow:
        return self._window

    @property
    def scroll_top(self) -> float:
        return self._scroll_top

    @property
    def total_height(self) -> float:
        return len(self._items) * self._item_height

    def scroll_to(self, scroll_top: float) -> bool:
        """Handle a scroll event. Returns False if it was throttled away."""
        return self._throttled_scroll(scroll_top) is not None

    def flush(self) -> bool:
        """Apply the last scroll position the throttle dropped, if any."""
        return self._throttled_scroll.flush() is not None

    def _apply_scroll(self, scroll_top: float) -> VisibleWindow:
        self._scroll_top = scroll_top
        self._recompute()
        if self._on_scroll is not None:
            self._on_scroll(scroll_top)
        return self._window

    def set_items(self, items: Sequence[T]) -> None:
        self._items = items
        self._recompute()

    def resize(self, container_height: float) -> None:
        self._container_height = container_height
        self._recompute()

    def _recompute(self) -> None:
        self._window = compute_window(
            self._scroll_top,
            self._container_height,
            self._item_height,
            len(self._items),
            self._overscan,
        )

    def visible_items(self) -> list[tuple[int, T]]:
        """(index, item) pairs for the rows in the current window."""
        window = self._window
        return [
            (index, self._items[index])
            for index in range(window.start_index, window.end_index + 1)
        ]
