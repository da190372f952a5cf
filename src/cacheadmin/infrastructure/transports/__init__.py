"""Admin API transports."""

from cacheadmin.infrastructure.transports.http import HttpAdminTransport

__all__ = ["HttpAdminTransport"]
