"""Metrics snapshot entities."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from cacheadmin.core.entities.backend import CacheFamily
from cacheadmin.core.exceptions import ResponseFormatError

_COUNTER_FIELDS = (
    "operations_success",
    "operations_failure",
    "entries_removed",
    "bytes_reclaimed",
)


@dataclass(frozen=True)
class Counters:
    """Process-wide flush counters for one cache family.

    A counter the server did not report is kept as None; callers that
    display counters treat None as zero.
    """

    operations_success: int | None = None
    operations_failure: int | None = None
    entries_removed: int | None = None
    bytes_reclaimed: int | None = None

    @classmethod
    def from_payload(cls, data: Any) -> "Counters":
        """Parse one family's counters.

        Raises:
            ResponseFormatError: If the data is not an object or a counter
                is not an integer.
        """
        if not isinstance(data, Mapping):
            raise ResponseFormatError("Metrics counters are not a JSON object")

        values: dict[str, int | None] = {}
        for name in _COUNTER_FIELDS:
            value = data.get(name)
            if value is not None and (
                not isinstance(value, int) or isinstance(value, bool) or value < 0
            ):
                raise ResponseFormatError(
                    f"Metrics counter '{name}' is not a non-negative integer"
                )
            values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time read of the server's flush counters.

    Never mutated; each poll produces a new snapshot that replaces the
    previous one wholesale.
    """

    cache_types: Mapping[CacheFamily, Counters]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def counters(self, family: CacheFamily) -> Counters:
        """Return counters for a family, empty if the server omitted it."""
        return self.cache_types.get(family, Counters())

    @classmethod
    def from_payload(cls, data: Any) -> "MetricsSnapshot":
        """Parse a ``GET /admin/v1/cache/metrics`` body.

        Unknown cache types are ignored.

        Raises:
            ResponseFormatError: If the body does not have the expected shape.
        """
        if not isinstance(data, Mapping):
            raise ResponseFormatError("Metrics response is not a JSON object")

        cache_types = data.get("cache_types")
        if not isinstance(cache_types, Mapping):
            raise ResponseFormatError("Metrics response is missing 'cache_types'")

        parsed: dict[CacheFamily, Counters] = {}
        for family in CacheFamily:
            if cache_types.get(family.value) is not None:
                parsed[family] = Counters.from_payload(cache_types[family.value])

        return cls(cache_types=parsed)
