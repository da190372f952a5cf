"""FastAPI hosting view for the cache admin dashboard.

Serves the two flush forms and the metrics panel as JSON endpoints. The
metrics poller is started by the app lifespan and stopped on shutdown,
so no timer outlives the app.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from cacheadmin.core.entities.backend import BackendId, CacheFamily
from cacheadmin.core.entities.config import AdminClientConfig
from cacheadmin.core.exceptions import (
    SubmissionInProgressError,
    TransportError,
    ValidationError,
)
from cacheadmin.core.interfaces.transport import IAdminTransport
from cacheadmin.core.services.flush_orchestrator import FlushOrchestrator
from cacheadmin.core.services.metrics_poller import MetricsPoller
from cacheadmin.infrastructure.transports.http import HttpAdminTransport

logger = logging.getLogger(__name__)


class FlushForm(BaseModel):
    """Raw flush form fields, validated by the resolvers, not here."""

    model_config = ConfigDict(populate_by_name=True)

    scope: str | None = None
    instance_name: str | None = Field(default=None, alias="instanceName")
    digest_prefix: str | None = Field(default=None, alias="digestPrefix")
    flush_redis: bool = Field(default=False, alias="flushRedis")
    flush_in_memory: bool = Field(default=False, alias="flushInMemory")
    flush_filesystem: bool = Field(default=False, alias="flushFilesystem")
    flush_in_memory_lru: bool = Field(default=False, alias="flushInMemoryLRU")
    flush_redis_worker_map: bool = Field(default=False, alias="flushRedisWorkerMap")

    def flags(self, family: CacheFamily) -> dict[BackendId, bool]:
        """Return the backend flags for ``family``.

        Checked flags of the other family are passed through so the
        selector rejects them.
        """
        values = {
            BackendId.REDIS: self.flush_redis,
            BackendId.IN_MEMORY: self.flush_in_memory,
            BackendId.FILESYSTEM: self.flush_filesystem,
            BackendId.IN_MEMORY_LRU: self.flush_in_memory_lru,
            BackendId.REDIS_WORKER_MAP: self.flush_redis_worker_map,
        }
        return {
            backend: enabled
            for backend, enabled in values.items()
            if backend in family.backends or enabled
        }


def create_dashboard_app(
    config: AdminClientConfig | None = None,
    transport: IAdminTransport | None = None,
    poll_interval: float | None = None,
) -> FastAPI:
    """Create the dashboard app.

    Args:
        config: Client configuration. Uses defaults if not provided.
        transport: Transport to the admin API. An HttpAdminTransport is
            created (and closed on shutdown) if not provided.
        poll_interval: Override for the metrics poll interval in seconds.

    Returns:
        A FastAPI application.
    """
    config = config or AdminClientConfig()
    owned_transport: HttpAdminTransport | None = None
    if transport is None:
        owned_transport = HttpAdminTransport(config)
        transport = owned_transport

    forms = {
        family: FlushOrchestrator(family, transport, config)
        for family in CacheFamily
    }
    poller = MetricsPoller(transport, config, interval=poll_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting metrics poller against %s", config.base_url)
        async with poller:
            yield
        logger.info("Metrics poller stopped")
        if owned_transport is not None:
            await owned_transport.close()

    app = FastAPI(
        title="Cache Admin Dashboard",
        description="Flush the Action Cache and CAS and watch flush metrics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.poller = poller
    app.state.forms = forms

    @app.get("/dashboard/metrics")
    async def get_metrics() -> dict[str, Any]:
        return poller.state.to_dict()

    @app.post("/dashboard/metrics/refresh")
    async def refresh_metrics() -> dict[str, Any]:
        state = await poller.refresh()
        return state.to_dict()

    async def flush(family: CacheFamily, form: FlushForm) -> JSONResponse:
        orchestrator = forms[family]
        try:
            result = await orchestrator.submit_form(
                raw_scope=form.scope,
                raw_instance=form.instance_name,
                raw_digest_prefix=form.digest_prefix,
                flags=form.flags(family),
            )
        except ValidationError as e:
            return JSONResponse(
                status_code=400,
                content={"errorCode": "INVALID_ARGUMENT", "message": str(e)},
            )
        except SubmissionInProgressError as e:
            return JSONResponse(
                status_code=409,
                content={"errorCode": "FLUSH_IN_PROGRESS", "message": str(e)},
            )
        except TransportError as e:
            display = orchestrator.display
            return JSONResponse(
                status_code=502,
                content={
                    "errorCode": e.error_code or "UPSTREAM_ERROR",
                    "message": e.message,
                    "upstreamStatus": e.status_code,
                    "display": display.to_dict() if display else None,
                },
            )

        display = orchestrator.display
        return JSONResponse(
            status_code=200,
            content={
                "success": result.success,
                "display": display.to_dict() if display else None,
            },
        )

    @app.post("/dashboard/action-cache/flush")
    async def flush_action_cache(form: FlushForm) -> JSONResponse:
        return await flush(CacheFamily.ACTION_CACHE, form)

    @app.post("/dashboard/cas/flush")
    async def flush_cas(form: FlushForm) -> JSONResponse:
        return await flush(CacheFamily.CAS, form)

    return app
