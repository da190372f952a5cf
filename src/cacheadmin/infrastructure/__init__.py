"""Infrastructure layer implementations for cacheadmin."""

from cacheadmin.infrastructure.serializers import JsonSerializer, SerializationError
from cacheadmin.infrastructure.transports import HttpAdminTransport

__all__ = [
    "HttpAdminTransport",
    "JsonSerializer",
    "SerializationError",
]
