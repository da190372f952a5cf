"""Admin API transport interface."""

from typing import Any, Protocol


class IAdminTransport(Protocol):
    """Contract for talking to the cache admin API.

    Implementations send JSON requests and return decoded JSON objects.
    Every failure, whether the network, a non-2xx status or an unreadable
    body, must surface as a TransportError carrying a non-empty message.
    """

    async def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body and return the decoded response object.

        Args:
            path: API path, relative to the configured base URL.
            payload: The request body.

        Returns:
            The decoded JSON response object.

        Raises:
            TransportError: If the request fails for any reason.
        """
        ...

    async def get_json(self, path: str) -> dict[str, Any]:
        """GET a resource and return the decoded response object.

        Args:
            path: API path, relative to the configured base URL.

        Returns:
            The decoded JSON response object.

        Raises:
            TransportError: If the request fails for any reason.
        """
        ...
