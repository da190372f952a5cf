"""cacheadmin - Client for the remote build cache admin API.

An async Python library for selectively flushing a two-tier remote
build cache (Action Cache and CAS) and watching its flush counters.
Flush requests are validated before anything is sent, fan out to the
selected backends on the server, and come back as a single result with
optional per-backend breakdowns.

Example:
    from cacheadmin import (
        AdminClientConfig,
        CacheFamily,
        FlushOrchestrator,
        HttpAdminTransport,
        MetricsPoller,
    )

    config = AdminClientConfig(base_url="http://buildfarm:8980")

    async with HttpAdminTransport(config) as transport:
        cas_form = FlushOrchestrator(CacheFamily.CAS, transport, config)
        await cas_form.submit_form(
            raw_scope="DIGEST_PREFIX",
            raw_instance=None,
            raw_digest_prefix="ab12",
            flags={"FILESYSTEM": True, "IN_MEMORY_LRU": True},
        )
        print(cas_form.display.to_text())

        async with MetricsPoller(transport, config) as poller:
            ...  # poller.state is refreshed every 30 seconds

Serving the dashboard from an ASGI app:
    from cacheadmin.adapters.fastapi import create_dashboard_app

    app = create_dashboard_app(AdminClientConfig.from_env())
"""

from cacheadmin.core.entities import (
    METRICS_PATH,
    AdminClientConfig,
    BackendId,
    BackendSelection,
    BreakdownRow,
    CacheFamily,
    Counters,
    CountersView,
    DisplayModel,
    FlushRequest,
    FlushResult,
    FlushState,
    MetricsDisplayState,
    MetricsSnapshot,
    Scope,
    ScopeKind,
    SubmitControl,
)
from cacheadmin.core.exceptions import (
    CacheAdminError,
    EmptySelectionError,
    InvalidEnumError,
    MissingFieldError,
    ResponseFormatError,
    SubmissionInProgressError,
    TransportError,
    ValidationError,
)
from cacheadmin.core.interfaces import IAdminTransport, ISerializer
from cacheadmin.core.services import (
    FlushOrchestrator,
    MetricsListener,
    MetricsPoller,
    ResultFormatter,
    resolve_backends,
    resolve_scope,
)
from cacheadmin.infrastructure import (
    HttpAdminTransport,
    JsonSerializer,
    SerializationError,
)
from cacheadmin.utils.units import format_bytes

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "AdminClientConfig",
    # Core entities
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
    # Display models
    "BreakdownRow",
    "CountersView",
    "DisplayModel",
    "MetricsDisplayState",
    "SubmitControl",
    # Errors
    "CacheAdminError",
    "ValidationError",
    "MissingFieldError",
    "InvalidEnumError",
    "EmptySelectionError",
    "TransportError",
    "ResponseFormatError",
    "SubmissionInProgressError",
    # Core interfaces
    "IAdminTransport",
    "ISerializer",
    # Core services
    "resolve_scope",
    "resolve_backends",
    "FlushOrchestrator",
    "ResultFormatter",
    "MetricsPoller",
    "MetricsListener",
    # Infrastructure implementations
    "HttpAdminTransport",
    "JsonSerializer",
    "SerializationError",
    # Utilities
    "format_bytes",
]
