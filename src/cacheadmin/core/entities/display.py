"""Display models consumed by whatever view hosts the dashboard."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cacheadmin.core.entities.backend import CacheFamily


@dataclass(frozen=True)
class BreakdownRow:
    """One backend line of a per-backend breakdown table."""

    backend: str
    value: str


@dataclass(frozen=True)
class DisplayModel:
    """Rendered outcome of a flush, ready for a view to show.

    ``entries_breakdown`` and ``bytes_breakdown`` are None when the
    server did not report that breakdown, so a view can omit the table
    entirely rather than show an empty one.
    """

    success: bool
    banner: str
    entries_removed: str | None = None
    bytes_reclaimed: str | None = None
    entries_breakdown: tuple[BreakdownRow, ...] | None = None
    bytes_breakdown: tuple[BreakdownRow, ...] | None = None

    def to_text(self) -> str:
        """Render as a plain text block."""
        lines = [self.banner]
        if self.entries_removed is not None:
            lines.append(f"Entries removed: {self.entries_removed}")
        if self.bytes_reclaimed is not None:
            lines.append(f"Bytes reclaimed: {self.bytes_reclaimed}")
        if self.entries_breakdown is not None:
            lines.append("Entries removed by backend:")
            lines.extend(f"  {row.backend}: {row.value}" for row in self.entries_breakdown)
        if self.bytes_breakdown is not None:
            lines.append("Bytes reclaimed by backend:")
            lines.extend(f"  {row.backend}: {row.value}" for row in self.bytes_breakdown)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        def rows(breakdown: tuple[BreakdownRow, ...] | None) -> dict[str, str] | None:
            if breakdown is None:
                return None
            return {row.backend: row.value for row in breakdown}

        return {
            "success": self.success,
            "banner": self.banner,
            "entriesRemoved": self.entries_removed,
            "bytesReclaimed": self.bytes_reclaimed,
            "entriesRemovedByBackend": rows(self.entries_breakdown),
            "bytesReclaimedByBackend": rows(self.bytes_breakdown),
            "text": self.to_text(),
        }


@dataclass
class SubmitControl:
    """State of the control that triggers a flush submission."""

    label: str = "Flush"
    enabled: bool = True


@dataclass(frozen=True)
class CountersView:
    """Counters of one family as shown on the dashboard.

    Missing counters are shown as zero.
    """

    operations_success: int = 0
    operations_failure: int = 0
    entries_removed: int = 0
    bytes_reclaimed: str | None = None  # CAS only


@dataclass
class MetricsDisplayState:
    """What the metrics view currently shows.

    ``counters`` always holds the last successfully fetched values; a
    failed tick only flips the visibility flags.
    """

    counters: dict[CacheFamily, CountersView] = field(default_factory=dict)
    visible: bool = False
    error_visible: bool = False
    error_message: str | None = None
    last_updated: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "visible": self.visible,
            "errorVisible": self.error_visible,
            "errorMessage": self.error_message,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "cacheTypes": {
                family.value: {
                    "operations_success": view.operations_success,
                    "operations_failure": view.operations_failure,
                    "entries_removed": view.entries_removed,
                    **(
                        {"bytes_reclaimed": view.bytes_reclaimed}
                        if view.bytes_reclaimed is not None
                        else {}
                    ),
                }
                for family, view in self.counters.items()
            },
        }
