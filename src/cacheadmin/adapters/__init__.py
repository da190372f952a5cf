"""Framework adapters for cacheadmin."""
