"""Result formatter - renders flush results into display models."""

from collections.abc import Callable, Mapping

from cacheadmin.core.entities.backend import CacheFamily
from cacheadmin.core.entities.display import BreakdownRow, DisplayModel
from cacheadmin.core.entities.flush import FlushResult
from cacheadmin.utils.units import format_bytes

SUCCESS_BANNER = "✓ Operation completed successfully"
FAILURE_BANNER = "✗ Operation failed: {message}"
ERROR_BANNER = "Error: {message}"


class ResultFormatter:
    """Renders FlushResult payloads for display.

    The payload is rendered exactly as returned. A ``success: false``
    result keeps its counts, and a breakdown table appears only when the
    server reported one.
    """

    def __init__(self, unknown_error_message: str = "Unknown error occurred") -> None:
        """Initialize the formatter.

        Args:
            unknown_error_message: Text used when a failure has no message.
        """
        self._unknown_error_message = unknown_error_message

    def render(self, result: FlushResult, family: CacheFamily) -> DisplayModel:
        """Render a flush result.

        Args:
            result: The parsed flush result.
            family: The cache family the result belongs to. Byte totals
                and breakdowns are only rendered for CAS.

        Returns:
            The display model.
        """
        if result.success:
            banner = SUCCESS_BANNER
        else:
            banner = FAILURE_BANNER.format(message=self._message_or_fallback(result.message))

        bytes_reclaimed: str | None = None
        bytes_breakdown: tuple[BreakdownRow, ...] | None = None
        if family.tracks_bytes:
            bytes_reclaimed = format_bytes(result.bytes_reclaimed or 0)
            bytes_breakdown = _rows(result.bytes_reclaimed_by_backend, format_bytes)

        return DisplayModel(
            success=result.success,
            banner=banner,
            entries_removed=str(result.entries_removed),
            bytes_reclaimed=bytes_reclaimed,
            entries_breakdown=_rows(result.entries_removed_by_backend, str),
            bytes_breakdown=bytes_breakdown,
        )

    def render_error(self, message: str | None) -> DisplayModel:
        """Render a transport failure.

        Args:
            message: The error message; blank falls back to the generic text.

        Returns:
            A failure display model with only a banner.
        """
        return DisplayModel(
            success=False,
            banner=ERROR_BANNER.format(message=self._message_or_fallback(message)),
        )

    def _message_or_fallback(self, message: str | None) -> str:
        if message and message.strip():
            return message
        return self._unknown_error_message


def _rows(
    breakdown: Mapping[str, int] | None,
    fmt: Callable[[int], str],
) -> tuple[BreakdownRow, ...] | None:
    if breakdown is None:
        return None
    return tuple(BreakdownRow(backend=k, value=fmt(v)) for k, v in breakdown.items())
