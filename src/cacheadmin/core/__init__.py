"""Core domain layer for cacheadmin."""

from cacheadmin.core.entities import (
    BackendId,
    BackendSelection,
    CacheFamily,
    FlushRequest,
    FlushResult,
    MetricsSnapshot,
    Scope,
)
from cacheadmin.core.interfaces import IAdminTransport, ISerializer
from cacheadmin.core.services import FlushOrchestrator, MetricsPoller

__all__ = [
    # Entities
    "BackendId",
    "BackendSelection",
    "CacheFamily",
    "FlushRequest",
    "FlushResult",
    "MetricsSnapshot",
    "Scope",
    # Interfaces
    "IAdminTransport",
    "ISerializer",
    # Services
    "FlushOrchestrator",
    "MetricsPoller",
]
