"""Capability detection from network and device hints."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from shopfront.types import Capabilities, ConnectionTier

logger = logging.getLogger(__name__)

HintSource = Callable[[], Mapping[str, Any]]

DEFAULT_DEVICE_MEMORY_GIB = 4
DEFAULT_LOGICAL_CORES = 4

_TIERS: dict[str, ConnectionTier] = {
    "slow-2g": ConnectionTier.SLOW,
    "2g": ConnectionTier.SLOW,
    "3g": ConnectionTier.MEDIUM,
    "4g": ConnectionTier.FAST,
}


def classify_connection(effective_type: str | None) -> ConnectionTier:
    """Map a Network Information ``effectiveType`` to a connection tier."""
    if not effective_type:
        return ConnectionTier.FAST
    return _TIERS.get(effective_type.strip().lower(), ConnectionTier.FAST)


def hints_from_headers(headers: Mapping[str, str]) -> dict[str, Any]:
    """Extract capability hints from HTTP Client Hints request headers.

    ``ECT`` carries the effective connection type and ``Device-Memory`` the
    approximate RAM in GiB. Header names are matched case-insensitively.
    """
    lowered = {name.lower(): value for name, value in headers.items()}
    hints: dict[str, Any] = {}
    if "ect" in lowered:
        hints["effective_type"] = lowered["ect"]
    if "device-memory" in lowered:
        hints["device_memory"] = lowered["device-memory"]
    return hints


def _positive_number(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparsable capability hint %r", value)
        return default
    return number if number > 0 else default


class CapabilityDetector:
    """Classify the runtime into a coarse speed/quality tier.

    ``source`` is called on every ``detect()`` so the snapshot reflects
    the hints available at call time. Absent or malformed hints fall back
    to a fast connection with 4 GiB and 4 cores.
    """

    def __init__(self, source: HintSource | Mapping[str, Any] | None = None) -> None:
        if source is None or callable(source):
            self._source = source
        else:
            hints = dict(source)
            self._source = lambda: hints

    def detect(self) -> Capabilities:
        hints: Mapping[str, Any] = self._source() if self._source else {}

        tier = classify_connection(hints.get("effective_type"))
        memory = _positive_number(hints.get("device_memory"), DEFAULT_DEVICE_MEMORY_GIB)
        cores = int(
            _positive_number(hints.get("hardware_concurrency"), DEFAULT_LOGICAL_CORES)
        )

        capabilities = Capabilities(
            connection_tier=tier,
            device_memory_gib=memory,
            logical_cores=cores,
        )
        logger.debug("Detected capabilities: %s", capabilities)
        return capabilities


def detect(hints: Mapping[str, Any] | None = None) -> Capabilities:
    """Detect capabilities from a one-off hint mapping."""
    return CapabilityDetector(hints).detect()
