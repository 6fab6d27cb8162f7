"""Tests for package exports."""

import shopfront


def test_public_api_available() -> None:
    """Test that the main entry points are importable from the package."""
    from shopfront import (
        AdaptivePolicy,
        CapabilityDetector,
        RequestCache,
        ResourceRegistry,
        VirtualList,
        compute_window,
        create_context,
    )

    # Just verify they're importable
    assert AdaptivePolicy is not None
    assert CapabilityDetector is not None
    assert RequestCache is not None
    assert ResourceRegistry is not None
    assert VirtualList is not None
    assert compute_window is not None
    assert create_context is not None


def test_all_names_resolve() -> None:
    for name in shopfront.__all__:
        assert hasattr(shopfront, name), name
