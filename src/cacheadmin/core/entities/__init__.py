"""Domain entities for cacheadmin."""

from cacheadmin.core.entities.backend import (
    METRICS_PATH,
    BackendId,
    BackendSelection,
    CacheFamily,
)
from cacheadmin.core.entities.config import AdminClientConfig
from cacheadmin.core.entities.display import (
    BreakdownRow,
    CountersView,
    DisplayModel,
    MetricsDisplayState,
    SubmitControl,
)
from cacheadmin.core.entities.flush import FlushRequest, FlushResult, FlushState
from cacheadmin.core.entities.metrics import Counters, MetricsSnapshot
from cacheadmin.core.entities.scope import Scope, ScopeKind

__all__ = [
    "AdminClientConfig",
    "BackendId",
    "BackendSelection",
    "CacheFamily",
    "METRICS_PATH",
    "Scope",
    "ScopeKind",
    "FlushRequest",
    "FlushResult",
    "FlushState",
    "Counters",
    "MetricsSnapshot",
    "BreakdownRow",
    "CountersView",
    "DisplayModel",
    "MetricsDisplayState",
    "SubmitControl",
]
