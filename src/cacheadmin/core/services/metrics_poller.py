"""Metrics poller - keeps the dashboard's flush counters up to date."""

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable

from cacheadmin.core.entities.backend import METRICS_PATH, CacheFamily
from cacheadmin.core.entities.config import AdminClientConfig
from cacheadmin.core.entities.display import CountersView, MetricsDisplayState
from cacheadmin.core.entities.metrics import MetricsSnapshot
from cacheadmin.core.exceptions import TransportError
from cacheadmin.core.interfaces.transport import IAdminTransport
from cacheadmin.utils.units import format_bytes

logger = logging.getLogger(__name__)

# Plain callbacks and coroutine functions are both accepted; the latter are awaited.
MetricsListener = Callable[[MetricsDisplayState], Awaitable[None] | None]


class MetricsPoller:
    """Periodically fetches a MetricsSnapshot and reconciles the display.

    The poller owns its timer: ``start()`` ticks once immediately and then
    every ``interval`` seconds at a fixed rate, ``stop()`` cancels the
    timer and any tick still waiting on the transport. Use it as an async
    context manager to tie it to the lifetime of the hosting view.

    Each tick runs as its own task, so a slow or hanging request never
    pushes back the ticks after it. When ticks overlap, only a result
    newer than the last applied one reaches the display.

    A successful tick replaces every displayed counter and shows the
    metrics view. A failed tick hides the view and shows the error
    indicator, leaving the last known counters in place.

    The poller is the only writer of its display state.
    """

    def __init__(
        self,
        transport: IAdminTransport,
        config: AdminClientConfig | None = None,
        interval: float | None = None,
        listeners: list[MetricsListener] | None = None,
    ) -> None:
        """Initialize the poller.

        Args:
            transport: Transport used to reach the admin API.
            config: Optional client configuration. Uses defaults if not provided.
            interval: Seconds between ticks. Defaults to ``config.poll_interval``.
            listeners: Callbacks invoked with the display state after each tick.
        """
        self._transport = transport
        self._config = config or AdminClientConfig()
        self._interval = self._config.poll_interval if interval is None else interval
        if self._interval <= 0:
            raise ValueError("interval must be positive")

        self._listeners: list[MetricsListener] = list(listeners or [])
        self._state = MetricsDisplayState()
        self._snapshot: MetricsSnapshot | None = None
        self._task: asyncio.Task[None] | None = None
        self._ticks: set[asyncio.Task[None]] = set()

        # Ticks are numbered so a slow tick cannot overwrite a newer one.
        self._issued = 0
        self._applied = 0

        # Statistics
        self._successes = 0
        self._failures = 0

    @property
    def state(self) -> MetricsDisplayState:
        return self._state

    @property
    def snapshot(self) -> MetricsSnapshot | None:
        """The last successfully fetched snapshot."""
        return self._snapshot

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stats(self) -> dict[str, int]:
        """Get tick statistics.

        Returns:
            Dictionary with successful, failed and total ticks.
        """
        return {
            "successes": self._successes,
            "failures": self._failures,
            "total": self._successes + self._failures,
        }

    def add_listener(self, listener: MetricsListener) -> None:
        """Register a callback invoked after each tick."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Start polling on the running event loop.

        Ticks once immediately. Calling start on a running poller is a no-op.
        """
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="cacheadmin-metrics-poller"
        )
        logger.debug("Metrics poller started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        """Cancel the timer and pending ticks, and wait for them. Safe to call twice."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

        pending = list(self._ticks)
        for tick in pending:
            tick.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.debug("Metrics poller stopped")

    async def refresh(self) -> MetricsDisplayState:
        """Run one tick on demand and return the resulting display state."""
        await self.tick()
        return self._state

    async def tick(self) -> bool:
        """Fetch a snapshot and reconcile the display state.

        Returns:
            True if the snapshot was fetched, False if the tick failed.
        """
        self._issued += 1
        seq = self._issued

        try:
            data = await self._transport.get_json(METRICS_PATH)
            snapshot = MetricsSnapshot.from_payload(data)
        except TransportError as e:
            self._failures += 1
            logger.warning("Metrics tick failed: %s", e.message)
            if seq > self._applied:
                self._applied = seq
                self._show_error(e.message)
                await self._notify()
            return False

        self._successes += 1
        if seq > self._applied:
            self._applied = seq
            self._snapshot = snapshot
            self._state = MetricsDisplayState(
                counters=_counter_views(snapshot),
                visible=True,
                error_visible=False,
                error_message=None,
                last_updated=snapshot.fetched_at,
            )
            logger.debug("Applied metrics snapshot from tick %d", seq)
            await self._notify()
        else:
            logger.debug("Discarded metrics snapshot from superseded tick %d", seq)
        return True

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            tick = loop.create_task(self._guarded_tick())
            self._ticks.add(tick)
            tick.add_done_callback(self._ticks.discard)

            next_tick += self._interval
            now = loop.time()
            if next_tick < now:
                # Skip slots missed while the loop was blocked instead of bursting.
                next_tick = now
            await asyncio.sleep(next_tick - now)

    async def _guarded_tick(self) -> None:
        try:
            await self.tick()
        except Exception:
            logger.exception("Unexpected error during metrics tick")

    def _show_error(self, message: str) -> None:
        # Counters stay as they were; only visibility changes.
        self._state.visible = False
        self._state.error_visible = True
        self._state.error_message = message

    async def _notify(self) -> None:
        for listener in self._listeners:
            try:
                result = listener(self._state)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Metrics listener %r failed", listener)

    async def __aenter__(self) -> "MetricsPoller":
        """Async context manager entry; starts polling."""
        self.start()
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit; stops polling."""
        await self.stop()


def _counter_views(snapshot: MetricsSnapshot) -> dict[CacheFamily, CountersView]:
    views: dict[CacheFamily, CountersView] = {}
    for family in CacheFamily:
        counters = snapshot.counters(family)
        views[family] = CountersView(
            operations_success=counters.operations_success or 0,
            operations_failure=counters.operations_failure or 0,
            entries_removed=counters.entries_removed or 0,
            bytes_reclaimed=(
                format_bytes(counters.bytes_reclaimed or 0)
                if family.tracks_bytes
                else None
            ),
        )
    return views
