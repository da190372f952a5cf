"""HTTP transport for the cache admin API."""

import logging
from typing import Any

import httpx

from cacheadmin.core.entities.config import AdminClientConfig
from cacheadmin.core.exceptions import ResponseFormatError, TransportError
from cacheadmin.core.interfaces.serializer import ISerializer
from cacheadmin.infrastructure.serializers.json import JsonSerializer, SerializationError

logger = logging.getLogger(__name__)

# Error body fields that are not carried over into TransportError.details
_ERROR_ENVELOPE = ("message", "errorCode", "details")


class HttpAdminTransport:
    """Admin API transport backed by ``httpx.AsyncClient``.

    Turns every failure mode into a TransportError:

    - network errors (connect, timeout, protocol) keep the httpx message;
    - non-2xx responses use the ``message`` field of the JSON error body,
      falling back to the configured generic message;
    - 2xx responses whose body is not a JSON object raise
      ResponseFormatError.
    """

    def __init__(
        self,
        config: AdminClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
        serializer: ISerializer | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Client configuration. Uses defaults if not provided.
            client: Optional pre-built client (e.g. with a mock transport).
                A client passed in is not closed by ``close()``.
            serializer: Body serializer. Defaults to JsonSerializer.
        """
        self._config = config or AdminClientConfig()
        self._serializer = serializer or JsonSerializer()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            headers=self._config.headers,
        )

    async def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body and return the decoded response object."""
        try:
            body = self._serializer.encode(payload)
        except SerializationError as e:
            raise TransportError(str(e)) from e

        return await self._request(
            "POST",
            path,
            content=body,
            headers={"Content-Type": self._serializer.content_type},
        )

    async def get_json(self, path: str) -> dict[str, Any]:
        """GET a resource and return the decoded response object."""
        return await self._request("GET", path)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            raise TransportError(str(e) or self._config.unknown_error_message) from e

        if not response.is_success:
            error = self._error_from_response(response)
            logger.warning(
                "%s %s returned %d: %s",
                method,
                path,
                response.status_code,
                error.message,
            )
            raise error

        try:
            data = self._serializer.decode(response.content)
        except SerializationError as e:
            raise ResponseFormatError(str(e), status_code=response.status_code) from e

        if not isinstance(data, dict):
            raise ResponseFormatError(
                "Response body is not a JSON object",
                status_code=response.status_code,
            )
        return data

    def _error_from_response(self, response: httpx.Response) -> TransportError:
        """Build a TransportError from a non-2xx response.

        Rate-limit and concurrency-limit bodies carry extra numeric fields
        next to ``message``; those end up in ``details``.
        """
        try:
            data = self._serializer.decode(response.content)
        except SerializationError:
            data = None

        message: str | None = None
        error_code: str | None = None
        details: dict[str, Any] = {}

        if isinstance(data, dict):
            raw_message = data.get("message")
            if isinstance(raw_message, str) and raw_message.strip():
                message = raw_message
            raw_code = data.get("errorCode")
            if isinstance(raw_code, str):
                error_code = raw_code
            raw_details = data.get("details")
            if isinstance(raw_details, dict):
                details.update(raw_details)
            details.update(
                (k, v) for k, v in data.items() if k not in _ERROR_ENVELOPE
            )

        return TransportError(
            message or self._config.unknown_error_message,
            status_code=response.status_code,
            error_code=error_code,
            details=details,
        )

    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpAdminTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
