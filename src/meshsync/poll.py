"""Poll loop: fetch snapshots on a cancellable timer.

Everything runs on one asyncio event loop. A fetch is started either by
the timer or by ``trigger()``; the next timer is only armed after the
previous fetch, including its snapshot callback, has finished, so two
fetches never overlap.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from meshsync.events.types import FetchErrorEvent, PollToggledEvent
from meshsync.exceptions import MalformedSnapshotError, SettingsError, TransportError

if TYPE_CHECKING:
    from meshsync.events.dispatcher import EventDispatcher
    from meshsync.snapshot.source import SnapshotSource

logger = logging.getLogger(__name__)


class Timer:
    """A single cancellable scheduled call on the running event loop.

    Scheduling again replaces the pending call.

    Args:
        callback: Called with no arguments when the timer fires
    """

    def __init__(self, callback: Callable[[], Any]) -> None:
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not fired yet."""
        return self._handle is not None

    def schedule(self, delay: float) -> None:
        """Arm the timer to fire *delay* seconds from now."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)

    def cancel(self) -> bool:
        """Cancel the pending call. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class PollLoop:
    """Repeatedly fetch snapshots from *source* and hand them to *on_snapshot*.

    Args:
        source: Snapshot source to poll
        on_snapshot: Synchronous callback receiving each decoded payload
        interval_ms: Delay between the end of one fetch and the next
        enabled: Whether the loop reschedules itself after each fetch
        dispatcher: Optional EventDispatcher for FetchErrorEvent / PollToggledEvent
        session_id: Session id stamped on emitted events

    Example:
        >>> loop = PollLoop(source, session.apply_snapshot, interval_ms=2000)  # doctest: +SKIP
        >>> loop.start()  # fetches immediately, then every 2s  # doctest: +SKIP
    """

    def __init__(
        self,
        source: SnapshotSource,
        on_snapshot: Callable[[Any], Any],
        *,
        interval_ms: int = 5000,
        enabled: bool = True,
        dispatcher: EventDispatcher | None = None,
        session_id: str = "poll",
    ) -> None:
        _check_interval(interval_ms)
        self._source = source
        self._on_snapshot = on_snapshot
        self._interval_ms = interval_ms
        self._enabled = enabled
        self._dispatcher = dispatcher
        self._session_id = session_id
        self._timer = Timer(self.trigger)
        self._task: asyncio.Task[None] | None = None
        self._closed = False
        self.fetches = 0

    @property
    def source(self) -> SnapshotSource:
        return self._source

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def in_flight(self) -> bool:
        """True while a fetch (or its snapshot callback) is running."""
        return self._task is not None

    @property
    def scheduled(self) -> bool:
        """True while the next fetch is waiting on the timer."""
        return self._timer.pending

    def start(self) -> None:
        """Fetch once immediately if polling is enabled."""
        if self._enabled:
            self.trigger()

    def trigger(self) -> bool:
        """Start a fetch now.

        Returns:
            False if a fetch is already in flight or the loop is closed
        """
        if self._closed or self._task is not None:
            return False
        self._timer.cancel()
        self._task = asyncio.get_running_loop().create_task(self._tick())
        return True

    def enable(self) -> None:
        """Resume polling with an immediate fetch."""
        if self._enabled:
            return
        self._enabled = True
        self._emit_toggled()
        self.trigger()

    def disable(self) -> None:
        """Stop polling. A fetch already in flight completes but is not followed up."""
        if not self._enabled:
            return
        self._enabled = False
        self._timer.cancel()
        self._emit_toggled()

    def set_enabled(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

    def set_interval(self, interval_ms: int) -> None:
        """Change the poll interval. A pending timer is re-armed with the new delay."""
        _check_interval(interval_ms)
        self._interval_ms = interval_ms
        if self._timer.pending:
            self._timer.schedule(interval_ms / 1000)

    async def join(self) -> None:
        """Wait for the in-flight fetch, if any, to finish."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def aclose(self) -> None:
        """Cancel the timer and wait for the in-flight fetch. The loop cannot be restarted."""
        self._closed = True
        self._enabled = False
        self._timer.cancel()
        await self.join()

    async def _tick(self) -> None:
        try:
            self.fetches += 1
            try:
                payload = await self._source.fetch()
            except (TransportError, MalformedSnapshotError) as e:
                logger.warning("No snapshot from %r: %s", self._source, e)
                self._emit_fetch_error(e)
                return
            except Exception as e:
                logger.warning("Snapshot source %r failed", self._source, exc_info=True)
                self._emit_fetch_error(e)
                return

            try:
                self._on_snapshot(payload)
            except Exception:
                logger.warning("Snapshot callback failed", exc_info=True)
        finally:
            self._task = None
            if self._enabled and not self._closed:
                self._timer.schedule(self._interval_ms / 1000)

    def _emit_fetch_error(self, error: BaseException) -> None:
        if self._dispatcher is None:
            return
        self._dispatcher.emit(
            FetchErrorEvent(
                session_id=self._session_id,
                source=repr(self._source),
                error=str(error),
                error_type=f"{type(error).__module__}.{type(error).__qualname__}",
            )
        )

    def _emit_toggled(self) -> None:
        if self._dispatcher is None:
            return
        self._dispatcher.emit(
            PollToggledEvent(
                session_id=self._session_id,
                enabled=self._enabled,
                interval_ms=self._interval_ms,
            )
        )


def _check_interval(interval_ms: int) -> None:
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms <= 0:
        raise SettingsError("poll_interval_ms", interval_ms, f"poll_interval_ms must be a positive integer, got {interval_ms!r}")
