"""shopfront - Adaptive resource delivery for storefronts."""

import logging

# Adaptive delivery
from shopfront.adaptive import AdaptivePolicy
from shopfront.budget import PerformanceBudget
from shopfront.capabilities import (
    CapabilityDetector,
    classify_connection,
    detect,
    hints_from_headers,
)
from shopfront.clock import Clock, ManualClock, SystemClock
from shopfront.context import DeliveryContext, create_context

# Duration parsing
from shopfront.duration import parse_duration
from shopfront.errors import (
    InvalidArgument,
    NotFoundError,
    ShopfrontError,
    TransientFetchError,
)
from shopfront.loaders import Fetched, ResourceLoader, build_http_loaders
from shopfront.monitor import Measurement, measure
from shopfront.queue import LoadingQueue
from shopfront.ratelimit import Debounce, Throttle, debounce, throttle
from shopfront.registry import PreloadResult, ResourceRegistry, resource_id
from shopfront.request_cache import RequestCache

# Core types
from shopfront.types import (
    BudgetReport,
    CacheRecord,
    Capabilities,
    ConnectionTier,
    Duration,
    ImageQuality,
    Priority,
    ResourceDescriptor,
    ResourceEntry,
    ResourceKind,
    ResourceStats,
    ResourceStatus,
    VisibleWindow,
)
from shopfront.virtual_list import VirtualList, compute_window

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AdaptivePolicy",
    "BudgetReport",
    "CacheRecord",
    "Capabilities",
    "CapabilityDetector",
    "Clock",
    "ConnectionTier",
    "Debounce",
    "DeliveryContext",
    "Duration",
    "Fetched",
    "ImageQuality",
    "InvalidArgument",
    "LoadingQueue",
    "ManualClock",
    "Measurement",
    "NotFoundError",
    "PerformanceBudget",
    "PreloadResult",
    "Priority",
    "RequestCache",
    "ResourceDescriptor",
    "ResourceEntry",
    "ResourceKind",
    "ResourceLoader",
    "ResourceRegistry",
    "ResourceStats",
    "ResourceStatus",
    "ShopfrontError",
    "SystemClock",
    "Throttle",
    "TransientFetchError",
    "VirtualList",
    "VisibleWindow",
    "build_http_loaders",
    "classify_connection",
    "compute_window",
    "create_context",
    "debounce",
    "detect",
    "hints_from_headers",
    "measure",
    "parse_duration",
    "resource_id",
    "throttle",
]
