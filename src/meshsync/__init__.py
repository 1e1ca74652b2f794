"""meshsync - Keep a renderable graph model in sync with NetJSON topology snapshots."""

from meshsync.events import (
    BaseEvent,
    Event,
    EventDispatcher,
    EventProcessor,
    FetchErrorEvent,
    PollToggledEvent,
    SyncEndEvent,
    SyncStartEvent,
    SyncStatus,
    SyncTrigger,
    TypedEventProcessor,
)
from meshsync.events.rich_status import RichStatusProcessor
from meshsync.exceptions import (
    MalformedSnapshotError,
    SettingsError,
    TransportError,
)
from meshsync.graph import (
    ArrowDirection,
    CanonicalEdge,
    canonical_pair,
    canonicalize_links,
    edge_label,
    select_graph,
)
from meshsync.poll import PollLoop, Timer
from meshsync.settings import AddressFamily, ViewerSettings
from meshsync.sink import (
    InMemoryRenderSink,
    InMemoryStore,
    RecordStore,
    RenderEdge,
    RenderNode,
    RenderSink,
)
from meshsync.snapshot import (
    FileSnapshotSource,
    HttpSnapshotSource,
    LinkSpec,
    NetworkCollection,
    NetworkGraph,
    NodeSpec,
    SnapshotSource,
    parse_snapshot,
)
from meshsync.sync import DiffStats, SyncResult, SyncSession, apply_edges, apply_nodes

__all__ = [
    # Session
    "SyncSession",
    "SyncResult",
    "DiffStats",
    "apply_nodes",
    "apply_edges",
    # Settings
    "AddressFamily",
    "ViewerSettings",
    # Snapshots
    "NetworkCollection",
    "NetworkGraph",
    "NodeSpec",
    "LinkSpec",
    "parse_snapshot",
    "SnapshotSource",
    "HttpSnapshotSource",
    "FileSnapshotSource",
    # Graph normalization
    "ArrowDirection",
    "CanonicalEdge",
    "canonical_pair",
    "canonicalize_links",
    "edge_label",
    "select_graph",
    # Render sink
    "RecordStore",
    "RenderSink",
    "RenderNode",
    "RenderEdge",
    "InMemoryStore",
    "InMemoryRenderSink",
    # Polling
    "PollLoop",
    "Timer",
    # Errors
    "MalformedSnapshotError",
    "TransportError",
    "SettingsError",
    # Events
    "BaseEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "SyncStartEvent",
    "SyncEndEvent",
    "FetchErrorEvent",
    "PollToggledEvent",
    "SyncStatus",
    "SyncTrigger",
    "RichStatusProcessor",
]
