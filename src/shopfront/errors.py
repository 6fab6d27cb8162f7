"""Exceptions raised by shopfront."""

from __future__ import annotations


class ShopfrontError(Exception):
    """Base class for all shopfront errors."""


class NotFoundError(ShopfrontError, LookupError):
    """A resource id was never registered."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Resource {resource_id!r} not found")
        self.resource_id = resource_id


class TransientFetchError(ShopfrontError):
    """A load attempt failed (network error, bad status or timeout).

    Retried internally; only reaches the caller once the descriptor's retry
    budget is spent. The underlying error is chained as ``__cause__``.
    """

    def __init__(self, resource_id: str, attempts: int, reason: str) -> None:
        super().__init__(
            f"Failed to load resource {resource_id!r} after {attempts} "
            f"attempt(s): {reason}"
        )
        self.resource_id = resource_id
        self.attempts = attempts
        self.reason = reason


class InvalidArgument(ShopfrontError, ValueError):
    """A caller passed input that violates an operation's contract."""
