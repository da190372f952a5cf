"""Tests for MetricsPoller."""

import asyncio
from collections.abc import Callable

import pytest

from cacheadmin import (
    METRICS_PATH,
    AdminClientConfig,
    CacheFamily,
    CountersView,
    MetricsDisplayState,
    MetricsPoller,
    TransportError,
)


def _metrics(ac_success: int = 4, cas_bytes: int | None = 2048) -> dict:
    cas = {"operations_success": 2, "operations_failure": 1, "entries_removed": 7}
    if cas_bytes is not None:
        cas["bytes_reclaimed"] = cas_bytes
    return {
        "cache_types": {
            "action-cache": {
                "operations_success": ac_success,
                "operations_failure": 0,
                "entries_removed": 100,
            },
            "cas": cas,
        }
    }


async def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(poll(), timeout)


@pytest.fixture
def poller(transport, config: AdminClientConfig) -> MetricsPoller:
    """Create a poller with a short interval."""
    return MetricsPoller(transport, config, interval=0.01)


class TestTick:
    """Tests for a single reconciliation tick."""

    async def test_success_replaces_counters(self, poller: MetricsPoller, transport) -> None:
        """Test that a successful tick replaces the counters."""
        transport.queue(_metrics())

        assert await poller.tick() is True

        state = poller.state
        assert state.visible is True
        assert state.error_visible is False
        assert state.last_updated is not None
        assert state.counters[CacheFamily.ACTION_CACHE] == CountersView(
            operations_success=4, operations_failure=0, entries_removed=100
        )
        assert state.counters[CacheFamily.CAS].bytes_reclaimed == "2 KB"
        assert transport.calls == [("GET", METRICS_PATH, None)]

    async def test_missing_counters_display_as_zero(
        self, poller: MetricsPoller, transport
    ) -> None:
        """Test that missing counters are shown as zero."""
        transport.queue({"cache_types": {"action-cache": {}}})

        await poller.tick()

        assert poller.state.counters[CacheFamily.ACTION_CACHE] == CountersView()
        assert poller.state.counters[CacheFamily.CAS].bytes_reclaimed == "0 Bytes"
        # The snapshot itself keeps the gaps.
        assert poller.snapshot.counters(CacheFamily.CAS).bytes_reclaimed is None

    async def test_failure_keeps_last_counters(
        self, poller: MetricsPoller, transport
    ) -> None:
        """Test that a failed tick keeps the last counters."""
        transport.queue(_metrics(ac_success=4), TransportError("HTTP 503"))

        await poller.tick()
        before = dict(poller.state.counters)
        assert await poller.tick() is False

        state = poller.state
        assert state.visible is False
        assert state.error_visible is True
        assert state.error_message == "HTTP 503"
        assert state.counters == before

    async def test_recovery_clears_error_and_replaces_everything(
        self, poller: MetricsPoller, transport
    ) -> None:
        """Test a successful tick after a failure."""
        transport.queue(
            _metrics(ac_success=4),
            TransportError("down"),
            _metrics(ac_success=9, cas_bytes=None),
        )

        await poller.tick()
        await poller.tick()
        await poller.tick()

        state = poller.state
        assert state.visible is True
        assert state.error_visible is False
        assert state.error_message is None
        assert state.counters[CacheFamily.ACTION_CACHE].operations_success == 9
        assert state.counters[CacheFamily.CAS].bytes_reclaimed == "0 Bytes"

    async def test_first_tick_failure(self, poller: MetricsPoller, transport) -> None:
        """Test a failure before any snapshot was fetched."""
        transport.queue(TransportError("connection refused"))

        await poller.tick()

        assert poller.state.counters == {}
        assert poller.state.error_visible is True
        assert poller.snapshot is None

    async def test_malformed_snapshot_counts_as_failure(
        self, poller: MetricsPoller, transport
    ) -> None:
        """Test that an unparseable snapshot fails the tick."""
        transport.queue({"cache_types": "nope"})

        assert await poller.tick() is False
        assert poller.state.error_visible is True
        assert poller.stats == {"successes": 0, "failures": 1, "total": 1}

    async def test_refresh_returns_state(self, poller: MetricsPoller, transport) -> None:
        transport.queue(_metrics())

        state = await poller.refresh()

        assert state is poller.state
        assert state.visible is True

    async def test_superseded_tick_is_discarded(self, config: AdminClientConfig) -> None:
        """Test that a slow tick cannot overwrite a newer one."""
        release = asyncio.Event()
        responses = [_metrics(ac_success=1), _metrics(ac_success=2)]

        class SlowFirstTransport:
            calls = 0

            async def get_json(self, path: str) -> dict:
                SlowFirstTransport.calls += 1
                if SlowFirstTransport.calls == 1:
                    await release.wait()
                    return responses[0]
                return responses[1]

            async def post_json(self, path: str, payload: dict) -> dict:
                raise AssertionError("unexpected POST")

        poller = MetricsPoller(SlowFirstTransport(), config)
        slow = asyncio.create_task(poller.tick())
        await asyncio.sleep(0)

        await poller.tick()
        release.set()
        await slow

        assert poller.state.counters[CacheFamily.ACTION_CACHE].operations_success == 2

    async def test_listeners_notified(self, poller: MetricsPoller, transport) -> None:
        """Test that listeners see every tick even if one fails."""
        seen: list[MetricsDisplayState] = []

        def broken(state: MetricsDisplayState) -> None:
            raise RuntimeError("listener bug")

        poller.add_listener(broken)
        poller.add_listener(seen.append)
        transport.queue(_metrics(), TransportError("down"))

        await poller.tick()
        await poller.tick()

        assert len(seen) == 2
        assert seen[-1].error_visible is True

    async def test_async_listener_awaited(self, poller: MetricsPoller, transport) -> None:
        """Test that coroutine listeners are awaited, not just called."""
        seen: list[bool] = []

        async def listener(state: MetricsDisplayState) -> None:
            await asyncio.sleep(0)
            seen.append(state.visible)

        poller.add_listener(listener)
        transport.queue(_metrics())

        await poller.tick()

        assert seen == [True]


class TestLifecycle:
    """Tests for start/stop and scheduling."""

    async def test_start_ticks_immediately(self, transport, config) -> None:
        """Test that start ticks without waiting an interval."""
        poller = MetricsPoller(transport, config, interval=60)
        transport.queue(_metrics())

        poller.start()
        await _wait_for(lambda: poller.stats["total"] == 1)
        await poller.stop()

        assert poller.state.visible is True

    async def test_failed_tick_does_not_stop_schedule(
        self, poller: MetricsPoller, transport
    ) -> None:
        """Test that ticking continues after a failure."""
        transport.queue(TransportError("down"), *[_metrics()] * 50)

        poller.start()
        await _wait_for(lambda: poller.stats["successes"] >= 2)
        await poller.stop()

        assert poller.stats["failures"] == 1
        assert poller.state.error_visible is False

    async def test_stop_cancels_timer(self, poller: MetricsPoller, transport) -> None:
        """Test that no tick runs after stop."""
        transport.queue(*[_metrics()] * 50)

        poller.start()
        await _wait_for(lambda: poller.stats["total"] >= 1)
        await poller.stop()
        calls = len(transport.calls)
        await asyncio.sleep(0.05)

        assert poller.running is False
        assert len(transport.calls) == calls

    async def test_start_twice_is_noop(self, transport, config) -> None:
        """Test that a second start does not add a timer."""
        poller = MetricsPoller(transport, config, interval=60)
        transport.queue(_metrics(), _metrics())

        poller.start()
        poller.start()
        await _wait_for(lambda: poller.stats["total"] >= 1)
        await asyncio.sleep(0.02)
        await poller.stop()

        assert poller.stats["total"] == 1

    async def test_stop_without_start(self, poller: MetricsPoller) -> None:
        await poller.stop()
        await poller.stop()

        assert poller.running is False

    async def test_context_manager(self, transport, config) -> None:
        """Test polling inside an async with block."""
        transport.queue(_metrics())

        async with MetricsPoller(transport, config, interval=60) as poller:
            assert poller.running is True
            await _wait_for(lambda: poller.stats["total"] == 1)

        assert poller.running is False

    async def test_hanging_tick_does_not_delay_schedule(self, config) -> None:
        """Test that a request that never returns does not hold back later ticks."""
        started = 0
        cancelled = 0

        class HangingTransport:
            async def get_json(self, path: str) -> dict:
                nonlocal started, cancelled
                started += 1
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    cancelled += 1
                    raise

            async def post_json(self, path: str, payload: dict) -> dict:
                raise AssertionError("unexpected POST")

        poller = MetricsPoller(HangingTransport(), config, interval=0.01)

        poller.start()
        await _wait_for(lambda: started >= 3)
        await poller.stop()

        assert poller.stats["total"] == 0
        assert cancelled == started

    async def test_slow_failing_ticks_keep_fixed_rate(self, config) -> None:
        """Test that ticks slower than the interval still start on schedule."""
        starts: list[float] = []

        class SlowFailingTransport:
            async def get_json(self, path: str) -> dict:
                starts.append(asyncio.get_running_loop().time())
                await asyncio.sleep(0.2)
                raise TransportError("gateway timeout")

            async def post_json(self, path: str, payload: dict) -> dict:
                raise AssertionError("unexpected POST")

        poller = MetricsPoller(SlowFailingTransport(), config, interval=0.05)

        poller.start()
        # Awaiting each tick before the next would give one start per 0.2s.
        await _wait_for(lambda: len(starts) >= 4, timeout=0.35)
        await poller.stop()

        assert starts[3] - starts[0] < 0.3

    def test_interval_defaults_to_config(self, transport) -> None:
        poller = MetricsPoller(transport, AdminClientConfig(poll_interval=12))

        assert poller.interval == 12

    def test_interval_must_be_positive(self, transport) -> None:
        """Test that a non-positive interval is rejected."""
        with pytest.raises(ValueError):
            MetricsPoller(transport, interval=0)
