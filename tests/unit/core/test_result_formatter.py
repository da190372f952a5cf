"""Tests for ResultFormatter."""

import pytest

from cacheadmin import CacheFamily, FlushResult, ResultFormatter


@pytest.fixture
def formatter() -> ResultFormatter:
    """Create a formatter for testing."""
    return ResultFormatter()


class TestRenderResult:
    """Tests for rendering flush results."""

    def test_success_with_breakdown(self, formatter: ResultFormatter) -> None:
        """Test rendering a success with a per-backend breakdown."""
        result = FlushResult(
            success=True,
            entries_removed=42,
            entries_removed_by_backend={"REDIS": 30, "IN_MEMORY": 12},
        )

        display = formatter.render(result, CacheFamily.ACTION_CACHE)
        text = display.to_text()

        assert display.success is True
        assert display.banner == "✓ Operation completed successfully"
        assert "Entries removed: 42" in text
        assert "REDIS: 30" in text
        assert "IN_MEMORY: 12" in text
        assert [(r.backend, r.value) for r in display.entries_breakdown] == [
            ("REDIS", "30"),
            ("IN_MEMORY", "12"),
        ]

    def test_breakdown_omitted_when_absent(self, formatter: ResultFormatter) -> None:
        """Test that a missing breakdown is not rendered."""
        result = FlushResult(success=True, entries_removed=42)

        display = formatter.render(result, CacheFamily.ACTION_CACHE)

        assert display.entries_breakdown is None
        assert "by backend" not in display.to_text()

    def test_action_cache_has_no_bytes(self, formatter: ResultFormatter) -> None:
        """Test that Action Cache results show no bytes."""
        result = FlushResult(success=True, entries_removed=1, bytes_reclaimed=2048)

        display = formatter.render(result, CacheFamily.ACTION_CACHE)

        assert display.bytes_reclaimed is None
        assert "Bytes reclaimed" not in display.to_text()

    def test_cas_bytes(self, formatter: ResultFormatter) -> None:
        """Test byte totals and breakdowns of a CAS result."""
        result = FlushResult(
            success=True,
            entries_removed=3,
            bytes_reclaimed=1536,
            entries_removed_by_backend={"filesystem": 2, "in-memory-lru": 1},
            bytes_reclaimed_by_backend={"filesystem": 1024, "in-memory-lru": 512},
        )

        display = formatter.render(result, CacheFamily.CAS)
        text = display.to_text()

        assert display.bytes_reclaimed == "1.5 KB"
        assert "Bytes reclaimed: 1.5 KB" in text
        assert "filesystem: 1 KB" in text
        assert "in-memory-lru: 512 Bytes" in text

    def test_cas_missing_total_bytes_shows_zero(self, formatter: ResultFormatter) -> None:
        """Test a CAS result without a byte total."""
        display = formatter.render(
            FlushResult(success=True, entries_removed=0), CacheFamily.CAS
        )

        assert display.bytes_reclaimed == "0 Bytes"
        assert display.bytes_breakdown is None

    def test_partial_backend_success_is_still_success(
        self, formatter: ResultFormatter
    ) -> None:
        result = FlushResult(
            success=True,
            entries_removed=9,
            entries_removed_by_backend={"redis": 0, "in-memory": 9},
        )

        display = formatter.render(result, CacheFamily.ACTION_CACHE)

        assert display.success is True
        assert "redis: 0" in display.to_text()

    def test_failure_payload_rendered_as_returned(
        self, formatter: ResultFormatter
    ) -> None:
        """Test a failure payload keeps its counts."""
        result = FlushResult(
            success=False,
            message="redis unavailable",
            entries_removed=12,
            entries_removed_by_backend={"in-memory": 12},
        )

        display = formatter.render(result, CacheFamily.ACTION_CACHE)

        assert display.success is False
        assert display.banner == "✗ Operation failed: redis unavailable"
        assert display.entries_removed == "12"
        assert "in-memory: 12" in display.to_text()

    def test_failure_without_message(self, formatter: ResultFormatter) -> None:
        """Test a failure payload without a message."""
        display = formatter.render(
            FlushResult(success=False, entries_removed=0, message=""),
            CacheFamily.CAS,
        )

        assert display.banner == "✗ Operation failed: Unknown error occurred"


class TestRenderError:
    """Tests for rendering transport failures."""

    def test_error_message(self, formatter: ResultFormatter) -> None:
        """Test rendering a transport error."""
        display = formatter.render_error("disk full")

        assert display.success is False
        assert "disk full" in display.banner
        assert display.to_text() == "Error: disk full"

    @pytest.mark.parametrize("message", [None, "", "   "])
    def test_fallback_message(self, message: str | None) -> None:
        formatter = ResultFormatter(unknown_error_message="Something went wrong")

        display = formatter.render_error(message)

        assert display.banner == "Error: Something went wrong"

    def test_to_dict(self, formatter: ResultFormatter) -> None:
        """Test the JSON representation of a display."""
        data = formatter.render_error("boom").to_dict()

        assert data["success"] is False
        assert data["banner"] == "Error: boom"
        assert data["entriesRemovedByBackend"] is None
