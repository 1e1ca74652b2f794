"""Graph sync controller.

A ``SyncSession`` owns a render sink, the viewer settings, the last
received snapshot and, optionally, the poll loop feeding it. Each pass runs
the address-family filter, the edge canonicalizer, and then the node and
edge diff appliers, in that order.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from meshsync.events.dispatcher import EventDispatcher
from meshsync.events.types import SyncEndEvent, SyncStartEvent, SyncStatus, SyncTrigger
from meshsync.exceptions import MalformedSnapshotError
from meshsync.graph.canonical import canonicalize_links
from meshsync.graph.family import select_graph
from meshsync.poll import PollLoop
from meshsync.settings import AddressFamily, ViewerSettings
from meshsync.snapshot.types import NetworkCollection, parse_snapshot
from meshsync.sync.diff import DiffStats, apply_edges, apply_nodes

if TYPE_CHECKING:
    from meshsync.events.processor import EventProcessor
    from meshsync.sink.base import RenderSink
    from meshsync.snapshot.source import SnapshotSource
    from meshsync.snapshot.types import NetworkGraph

logger = logging.getLogger(__name__)

SKIP_MALFORMED = "malformed"
SKIP_NOT_A_COLLECTION = "not_a_collection"
SKIP_NO_MATCHING_GRAPH = "no_matching_graph"
SKIP_NO_SNAPSHOT = "no_snapshot"
SKIP_UNCHANGED = "unchanged"

# Settings that change what a pass produces
_DIFF_SETTINGS = frozenset({"address_family", "node_prefix", "edge_suffix", "root_highlight"})


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync pass.

    Attributes:
        status: APPLIED or SKIPPED
        reason: Skip reason (one of the ``SKIP_*`` constants), None if applied
        root_id: Router id of the graph that was applied
        nodes: Node mutation counts
        edges: Edge mutation counts
        duration_ms: Wall-clock duration in milliseconds
    """

    status: SyncStatus
    reason: str | None = None
    root_id: str | None = None
    nodes: DiffStats = field(default_factory=DiffStats)
    edges: DiffStats = field(default_factory=DiffStats)
    duration_ms: float = 0.0

    @classmethod
    def skipped(cls, reason: str) -> SyncResult:
        return cls(status=SyncStatus.SKIPPED, reason=reason)

    @property
    def applied(self) -> bool:
        return self.status == SyncStatus.APPLIED

    @property
    def mutations(self) -> int:
        return self.nodes.mutations + self.edges.mutations


class SyncSession:
    """Keep a render sink synchronized with topology snapshots.

    Args:
        sink: Render sink mutated by the diff appliers
        settings: Viewer settings (defaults to ``ViewerSettings()``)
        processors: Event processors notified of every pass
        dispatcher: Explicit dispatcher (overrides *processors*)
        session_id: Identifier stamped on events (random if omitted)

    Example:
        >>> from meshsync.sink import InMemoryRenderSink
        >>> session = SyncSession(InMemoryRenderSink())
        >>> result = session.apply_snapshot({
        ...     "type": "NetworkCollection",
        ...     "collection": [{
        ...         "type": "NetworkGraph", "router_id": "10.0.0.1",
        ...         "nodes": [{"id": "10.0.0.1"}, {"id": "10.0.0.2"}],
        ...         "links": [{"source": "10.0.0.1", "target": "10.0.0.2", "weight": 1}],
        ...     }],
        ... })
        >>> result.applied, sorted(session.sink.node_ids())
        (True, ['10.0.0.1', '10.0.0.2'])
    """

    def __init__(
        self,
        sink: RenderSink,
        settings: ViewerSettings | None = None,
        *,
        processors: list[EventProcessor] | None = None,
        dispatcher: EventDispatcher | None = None,
        session_id: str | None = None,
    ) -> None:
        self.sink = sink
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._settings = settings or ViewerSettings()
        self._dispatcher = dispatcher or EventDispatcher(processors)
        self._last_snapshot: NetworkCollection | None = None
        self._active_graph: NetworkGraph | None = None
        self._poll: PollLoop | None = None
        self._syncing = False

    # === State ===

    @property
    def settings(self) -> ViewerSettings:
        return self._settings

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def last_snapshot(self) -> NetworkCollection | None:
        """Last collection received, re-applied when settings change."""
        return self._last_snapshot

    @property
    def active_graph(self) -> NetworkGraph | None:
        """Graph the sink currently reflects."""
        return self._active_graph

    @property
    def root_id(self) -> str | None:
        """Id of the emphasized (locally-owned) node."""
        return self._active_graph.router_id if self._active_graph is not None else None

    @property
    def poll_loop(self) -> PollLoop | None:
        return self._poll

    # === Sync passes ===

    def apply_snapshot(self, payload: Any) -> SyncResult:
        """Parse *payload* and reconcile the sink with it.

        Malformed payloads and payloads without a matching graph leave the
        sink and the remembered snapshot unchanged.
        """

        def run() -> SyncResult:
            try:
                snapshot = parse_snapshot(payload)
            except MalformedSnapshotError as e:
                logger.warning("Skipping sync pass: %s", e)
                return SyncResult.skipped(SKIP_MALFORMED)
            if not isinstance(snapshot, NetworkCollection):
                logger.warning("Skipping sync pass: expected NetworkCollection, got %s", snapshot.type)
                return SyncResult.skipped(SKIP_NOT_A_COLLECTION)
            self._last_snapshot = snapshot
            return self._reconcile(snapshot)

        return self._run_pass(SyncTrigger.SNAPSHOT, run)

    def resync(self) -> SyncResult:
        """Re-apply the last snapshot with the current settings."""

        def run() -> SyncResult:
            if self._last_snapshot is None:
                return SyncResult.skipped(SKIP_NO_SNAPSHOT)
            return self._reconcile(self._last_snapshot)

        return self._run_pass(SyncTrigger.SETTINGS, run)

    def set_address_family(self, family: AddressFamily | str) -> SyncResult:
        """Switch the active address family and re-sync the last snapshot.

        Runs synchronously and does not touch the poll loop.
        """
        return self.update_settings(address_family=family)

    def update_settings(self, **changes: Any) -> SyncResult:
        """Apply setting *changes*; re-sync if they affect the diff.

        Poll settings (``poll_enabled``, ``poll_interval_ms``) are forwarded
        to the poll loop when one is running.

        Returns:
            The re-sync result, or a skipped result with reason ``SKIP_UNCHANGED``
            when no diff-relevant setting changed
        """
        previous = self._settings
        settings = previous.with_changes(**changes)

        if self._poll is not None:
            if settings.poll_interval_ms != previous.poll_interval_ms:
                self._poll.set_interval(settings.poll_interval_ms)
            if settings.poll_enabled != previous.poll_enabled:
                self._poll.set_enabled(settings.poll_enabled)
        self._settings = settings

        if any(getattr(self._settings, name) != getattr(previous, name) for name in _DIFF_SETTINGS):
            return self.resync()
        return SyncResult.skipped(SKIP_UNCHANGED)

    def _run_pass(self, trigger: SyncTrigger, run: Callable[[], SyncResult]) -> SyncResult:
        if self._syncing:
            raise RuntimeError("A sync pass is already running on this session")
        self._syncing = True
        start_event = SyncStartEvent(
            session_id=self.session_id,
            trigger=trigger,
            address_family=self._settings.address_family.value,
        )
        started = time.perf_counter()
        try:
            self._dispatcher.emit(start_event)
            result = run()
        finally:
            self._syncing = False
        result = replace(result, duration_ms=(time.perf_counter() - started) * 1000)

        self._dispatcher.emit(
            SyncEndEvent(
                session_id=self.session_id,
                span_id=start_event.span_id,
                status=result.status,
                reason=result.reason,
                root_id=result.root_id,
                nodes_added=result.nodes.added,
                nodes_updated=result.nodes.updated,
                nodes_removed=result.nodes.removed,
                edges_added=result.edges.added,
                edges_updated=result.edges.updated,
                edges_removed=result.edges.removed,
                duration_ms=result.duration_ms,
            )
        )
        return result

    def _reconcile(self, snapshot: NetworkCollection) -> SyncResult:
        settings = self._settings
        graph = select_graph(snapshot, settings.address_family)
        if graph is None:
            logger.info("No %s graph in snapshot, keeping current view", settings.address_family.value)
            return SyncResult.skipped(SKIP_NO_MATCHING_GRAPH)

        edges = canonicalize_links(graph.links)
        node_stats = apply_nodes(
            self.sink.nodes,
            graph.nodes,
            root_id=graph.router_id,
            prefix=settings.prefix_for(),
            highlight=settings.root_highlight,
        )
        edge_stats = apply_edges(self.sink.edges, edges, suffix=settings.edge_suffix)
        self._active_graph = graph

        logger.debug("Synced %s: nodes %s, edges %s", graph.router_id, node_stats, edge_stats)
        return SyncResult(
            status=SyncStatus.APPLIED,
            root_id=graph.router_id,
            nodes=node_stats,
            edges=edge_stats,
        )

    # === Polling ===

    def start_polling(self, source: SnapshotSource) -> PollLoop:
        """Create and start the poll loop feeding this session.

        Must be called from within a running event loop. Fetches once
        immediately when ``settings.poll_enabled`` is set.
        """
        if self._poll is not None:
            raise RuntimeError("Polling already started for this session")
        self._poll = PollLoop(
            source,
            self.apply_snapshot,
            interval_ms=self._settings.poll_interval_ms,
            enabled=self._settings.poll_enabled,
            dispatcher=self._dispatcher,
            session_id=self.session_id,
        )
        self._poll.start()
        return self._poll

    def set_polling(self, enabled: bool) -> None:
        """Switch polling on (fetching at once) or off (cancelling the timer)."""
        self.update_settings(poll_enabled=enabled)

    def set_poll_interval(self, interval_ms: int) -> None:
        self.update_settings(poll_interval_ms=interval_ms)

    def refresh(self) -> bool:
        """Fetch now, outside the schedule. Returns False if no fetch was started."""
        if self._poll is None:
            return False
        return self._poll.trigger()

    async def aclose(self) -> None:
        """Stop polling and shut down event processors."""
        if self._poll is not None:
            await self._poll.aclose()
        self._dispatcher.shutdown()

    async def __aenter__(self) -> SyncSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
