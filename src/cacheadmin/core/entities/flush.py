"""Flush request and result entities."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cacheadmin.core.entities.backend import BackendSelection, CacheFamily
from cacheadmin.core.entities.scope import Scope
from cacheadmin.core.exceptions import ResponseFormatError


class FlushState(Enum):
    """Lifecycle of one submission on a flush form."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (FlushState.SUCCEEDED, FlushState.FAILED)


@dataclass(frozen=True)
class FlushRequest:
    """Validated, immutable flush request.

    Build one from already-validated parts; see ``resolve_scope`` and
    ``resolve_backends`` for turning raw input into those parts.
    """

    scope: Scope
    backends: BackendSelection

    @property
    def family(self) -> CacheFamily:
        return self.backends.family

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body for the family's flush endpoint."""
        payload = self.scope.to_payload()
        payload.update(self.backends.to_payload())
        return payload


@dataclass(frozen=True)
class FlushResult:
    """Outcome of a flush as reported by the admin API.

    Totals are taken as reported and are expected to equal the sum of
    the per-backend breakdowns when both are present. Byte fields are
    only populated for CAS results.

    Attributes:
        success: Whether the server considers the flush successful.
        entries_removed: Total entries removed across backends.
        message: Optional server message (e.g. partial failure detail).
        entries_removed_by_backend: Per-backend entry counts, if reported.
        bytes_reclaimed: Total bytes reclaimed (CAS only).
        bytes_reclaimed_by_backend: Per-backend byte counts (CAS only).
    """

    success: bool
    entries_removed: int
    message: str | None = None
    entries_removed_by_backend: Mapping[str, int] | None = None
    bytes_reclaimed: int | None = None
    bytes_reclaimed_by_backend: Mapping[str, int] | None = None

    @classmethod
    def from_payload(cls, family: CacheFamily, data: Any) -> "FlushResult":
        """Parse a flush response body.

        Args:
            family: The cache family the request was sent to.
            data: The decoded JSON body.

        Returns:
            A new FlushResult.

        Raises:
            ResponseFormatError: If required fields are missing or a field
                has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise ResponseFormatError("Flush response is not a JSON object")

        success = data.get("success")
        if not isinstance(success, bool):
            raise ResponseFormatError("Flush response is missing 'success'")

        message = data.get("message")
        if message is not None and not isinstance(message, str):
            raise ResponseFormatError("Flush response 'message' is not a string")

        entries_removed = _require_count(data, "entriesRemoved")
        entries_by_backend = _optional_breakdown(data, "entriesRemovedByBackend")

        bytes_reclaimed: int | None = None
        bytes_by_backend: dict[str, int] | None = None
        if family.tracks_bytes:
            if data.get("bytesReclaimed") is not None:
                bytes_reclaimed = _require_count(data, "bytesReclaimed")
            bytes_by_backend = _optional_breakdown(data, "bytesReclaimedByBackend")

        return cls(
            success=success,
            entries_removed=entries_removed,
            message=message,
            entries_removed_by_backend=entries_by_backend,
            bytes_reclaimed=bytes_reclaimed,
            bytes_reclaimed_by_backend=bytes_by_backend,
        )


def _is_count(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _require_count(data: Mapping[str, Any], name: str) -> int:
    value = data.get(name)
    if not _is_count(value):
        raise ResponseFormatError(f"Flush response '{name}' is not a non-negative integer")
    return value


def _optional_breakdown(data: Mapping[str, Any], name: str) -> dict[str, int] | None:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ResponseFormatError(f"Flush response '{name}' is not an object")

    breakdown: dict[str, int] = {}
    for backend, count in value.items():
        if not _is_count(count):
            raise ResponseFormatError(
                f"Flush response '{name}' has an invalid count for {backend!r}"
            )
        breakdown[str(backend)] = count
    return breakdown
