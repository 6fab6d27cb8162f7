"""Tests for list virtualization."""

import pytest

from shopfront import InvalidArgument, ManualClock, VirtualList, VisibleWindow, compute_window


class TestComputeWindow:
    """Tests for compute_window()."""

    def test_top_of_list(self) -> None:
        window = compute_window(
            scroll_top=0, container_height=500, item_height=100, total_items=20, overscan=2
        )
        assert window == VisibleWindow(start_index=0, end_index=7, offset_y=0)

    def test_scroll_past_end_is_clamped(self) -> None:
        window = compute_window(
            scroll_top=1000, container_height=500, item_height=100, total_items=5, overscan=5
        )
        assert window.start_index == 0
        assert window.end_index == 4
        assert window.offset_y == 0

    def test_middle_of_list(self) -> None:
        window = compute_window(1050, 500, 100, 100, overscan=3)
        # raw_start=10, raw_end=15
        assert window == VisibleWindow(start_index=7, end_index=18, offset_y=700)
        assert window.count == 12

    def test_end_is_capped_at_last_item(self) -> None:
        window = compute_window(1500, 500, 100, 20, overscan=5)
        assert window.end_index == 19
        assert window.start_index == 10

    def test_empty_list(self) -> None:
        window = compute_window(300, 500, 100, 0)
        assert window == VisibleWindow(start_index=0, end_index=-1, offset_y=0)
        assert window.count == 0

    def test_negative_scroll_is_treated_as_top(self) -> None:
        assert compute_window(-40, 500, 100, 20, 0).start_index == 0

    @pytest.mark.parametrize("item_height", [0, -10])
    def test_non_positive_item_height(self, item_height: int) -> None:
        with pytest.raises(InvalidArgument):
            compute_window(0, 500, item_height, 20)

    def test_negative_overscan(self) -> None:
        with pytest.raises(InvalidArgument):
            compute_window(0, 500, 100, 20, overscan=-1)

    def test_invalid_argument_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            compute_window(0, -1, 100, 20)


class TestVirtualList:
    """Tests for the stateful VirtualList."""

    def test_initial_window_and_height(self) -> None:
        items = [f"product-{i}" for i in range(50)]
        vlist = VirtualList(
            items, item_height=100, container_height=300, overscan=1, clock=ManualClock()
        )
        assert vlist.total_height == 5000
        assert vlist.window == VisibleWindow(0, 4, 0)
        assert vlist.visible_items()[0] == (0, "product-0")
        assert len(vlist.visible_items()) == 5

    def test_scroll_is_throttled(self) -> None:
        clock = ManualClock()
        seen: list[float] = []
        vlist = VirtualList(
            list(range(100)),
            item_height=10,
            container_height=100,
            overscan=0,
            clock=clock,
            on_scroll=seen.append,
        )

        assert vlist.scroll_to(100)
        assert not vlist.scroll_to(110)  # within 16ms
        clock.advance(0.016)
        assert vlist.scroll_to(200)

        assert seen == [100, 200]
        assert vlist.scroll_top == 200
        assert vlist.window.start_index == 20

    def test_flush_applies_last_dropped_scroll(self) -> None:
        clock = ManualClock()
        vlist = VirtualList(
            list(range(100)), item_height=10, container_height=100, overscan=0, clock=clock
        )

        vlist.scroll_to(100)
        vlist.scroll_to(150)
        vlist.scroll_to(300)
        assert vlist.scroll_top == 100

        assert vlist.flush()
        assert vlist.scroll_top == 300
        assert vlist.window.start_index == 30
        assert not vlist.flush()

    def test_shrinking_items_keeps_window_valid(self) -> None:
        clock = ManualClock()
        vlist = VirtualList(
            list(range(100)), item_height=10, container_height=50, overscan=0, clock=clock
        )
        vlist.scroll_to(900)
        vlist.set_items(list(range(3)))
        assert vlist.window.end_index == 2
        assert [i for i, _ in vlist.visible_items()] == [0, 1, 2]

    def test_resize_recomputes(self) -> None:
        vlist = VirtualList(
            list(range(100)), item_height=10, container_height=50, overscan=0,
            clock=ManualClock(),
        )
        vlist.resize(100)
        assert vlist.window.end_index == 10
