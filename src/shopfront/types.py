"""Core types for shopfront resource delivery."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Duration type alias
Duration = str | int  # "30s", "5m", "2h", "1d" or milliseconds


class ResourceKind(str, Enum):
    """What a resource is, which decides how it is fetched."""

    IMAGE = "image"
    SCRIPT = "script"
    STYLE = "style"
    DATA = "data"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResourceStatus(str, Enum):
    PENDING = "pending"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ConnectionTier(str, Enum):
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"


class ImageQuality(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ComponentPriority(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    OPTIONAL = "optional"


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """Immutable declaration of a loadable resource."""

    url: str
    kind: ResourceKind
    priority: Priority = Priority.MEDIUM
    ttl: Duration | None = None  # None or zero means never stale
    max_retries: int = 3

    def __post_init__(self) -> None:
        # Accept plain strings ("image", "critical") for convenience
        object.__setattr__(self, "kind", ResourceKind(self.kind))
        object.__setattr__(self, "priority", Priority(self.priority))
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")


@dataclass(slots=True)
class ResourceEntry:
    """Runtime state of one registered descriptor."""

    id: str
    descriptor: ResourceDescriptor
    status: ResourceStatus = ResourceStatus.PENDING
    data: Any = None
    load_duration_ms: float = 0.0
    error_count: int = 0
    last_loaded_at: int = 0  # Unix timestamp ms


@dataclass(frozen=True, slots=True)
class CacheRecord:
    """A value held by the request cache."""

    key: str
    value: Any
    inserted_at: int  # Unix timestamp ms
    ttl: int  # milliseconds

    def is_expired(self, now: int) -> bool:
        return now - self.inserted_at > self.ttl


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Coarse snapshot of the visitor's network and device."""

    connection_tier: ConnectionTier = ConnectionTier.FAST
    device_memory_gib: float = 4
    logical_cores: int = 4


@dataclass(frozen=True, slots=True)
class VisibleWindow:
    """Slice of a virtualized list that should be rendered."""

    start_index: int
    end_index: int
    offset_y: float

    @property
    def count(self) -> int:
        return max(0, self.end_index - self.start_index + 1)


@dataclass(frozen=True, slots=True)
class ResourceStats:
    """Aggregate snapshot over all registered entries."""

    total: int = 0
    loaded: int = 0
    loading: int = 0
    error: int = 0
    pending: int = 0
    average_load_time_ms: float = 0.0
    total_load_time_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class BudgetReport:
    """Bytes transferred per category against the configured budgets."""

    metrics: dict[str, int] = field(default_factory=dict)
    budgets: dict[str, int] = field(default_factory=dict)
    within_budget: bool = True
