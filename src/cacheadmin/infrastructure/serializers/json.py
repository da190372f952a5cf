"""JSON body serializer."""

import json
from typing import Any


class SerializationError(Exception):
    """Raised when a body cannot be encoded or decoded."""

    pass


class JsonSerializer:
    """JSON serializer for admin API bodies.

    Encodes request payloads compactly and decodes response bodies,
    treating an empty body as None so callers can fall back to a
    generic error message.
    """

    content_type = "application/json"

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def encode(self, payload: dict[str, Any]) -> bytes:
        """Encode a request body.

        Raises:
            SerializationError: If the payload is not JSON-serializable.
        """
        try:
            return json.dumps(payload, separators=(",", ":")).encode(self._encoding)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode request body: {e}") from e

    def decode(self, data: bytes) -> Any:
        """Decode a response body.

        Raises:
            SerializationError: If the body is not valid JSON.
        """
        if not data or not data.strip():
            return None
        try:
            return json.loads(data.decode(self._encoding))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SerializationError(f"Failed to decode response body: {e}") from e
