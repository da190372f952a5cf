"""Core interfaces (Protocol classes) for cacheadmin."""

from cacheadmin.core.interfaces.serializer import ISerializer
from cacheadmin.core.interfaces.transport import IAdminTransport

__all__ = [
    "IAdminTransport",
    "ISerializer",
]
