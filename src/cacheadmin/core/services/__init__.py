"""Domain services for cacheadmin."""

from cacheadmin.core.services.backend_selector import resolve_backends
from cacheadmin.core.services.flush_orchestrator import FlushOrchestrator
from cacheadmin.core.services.metrics_poller import MetricsListener, MetricsPoller
from cacheadmin.core.services.result_formatter import ResultFormatter
from cacheadmin.core.services.scope_resolver import resolve_scope

__all__ = [
    # Validation
    "resolve_scope",
    "resolve_backends",
    # Flushing
    "FlushOrchestrator",
    "ResultFormatter",
    # Metrics
    "MetricsPoller",
    "MetricsListener",
]
