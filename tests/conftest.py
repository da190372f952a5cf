"""Pytest configuration for cacheadmin tests."""

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from cacheadmin import AdminClientConfig, HttpAdminTransport


class ScriptedTransport:
    """In-process admin transport that replays queued responses.

    Each queued item is either a response dict or an exception to raise.
    Items queued with ``route`` are only served to that path; everything
    else comes from the shared ``queue``. Setting ``gate`` to an
    asyncio.Event holds every call until it is set.
    """

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.routes: dict[str, list[Any]] = {}
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.gate: asyncio.Event | None = None

    def queue(self, *items: Any) -> None:
        self.responses.extend(items)

    def route(self, path: str, *items: Any) -> None:
        self.routes.setdefault(path, []).extend(items)

    async def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("POST", path, payload))
        return await self._next(path)

    async def get_json(self, path: str) -> dict[str, Any]:
        self.calls.append(("GET", path, None))
        return await self._next(path)

    async def _next(self, path: str) -> dict[str, Any]:
        if self.gate is not None:
            await self.gate.wait()
        pending = self.routes.get(path) or self.responses
        item = pending.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def transport() -> ScriptedTransport:
    """Create a scripted transport with an empty response queue."""
    return ScriptedTransport()


@pytest.fixture
def config() -> AdminClientConfig:
    """Create a config pointing at a fake admin host."""
    return AdminClientConfig(base_url="http://admin.test")


@pytest.fixture
async def http_transport_factory(config: AdminClientConfig):
    """Build HttpAdminTransports whose requests go to a handler function."""
    clients: list[httpx.AsyncClient] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> HttpAdminTransport:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=config.base_url,
        )
        clients.append(client)
        return HttpAdminTransport(config, client=client)

    yield factory

    for client in clients:
        await client.aclose()
