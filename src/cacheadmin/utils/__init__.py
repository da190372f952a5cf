"""Utility helpers for cacheadmin."""

from cacheadmin.utils.units import format_bytes

__all__ = ["format_bytes"]
