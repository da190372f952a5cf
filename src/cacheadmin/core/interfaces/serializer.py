"""Wire body serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for admin API request and response bodies.

    The transport encodes flush requests with ``encode`` and hands every
    response body to ``decode``. ``content_type`` is sent as the request
    Content-Type header.
    """

    content_type: str

    def encode(self, payload: dict[str, Any]) -> bytes:
        """Encode a request body.

        Raises:
            SerializationError: If the payload cannot be encoded.
        """
        ...

    def decode(self, data: bytes) -> Any:
        """Decode a response body.

        An empty body decodes to None.

        Raises:
            SerializationError: If the data is not a valid document.
        """
        ...
