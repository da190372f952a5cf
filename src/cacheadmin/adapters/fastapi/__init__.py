"""FastAPI adapter for cacheadmin."""

from cacheadmin.adapters.fastapi.app import FlushForm, create_dashboard_app

__all__ = [
    "create_dashboard_app",
    "FlushForm",
]
