"""Incremental synchronization of a render sink with topology snapshots."""

from meshsync.sync.diff import DiffStats, apply_edges, apply_nodes, build_render_edge, build_render_node
from meshsync.sync.session import (
    SKIP_MALFORMED,
    SKIP_NO_MATCHING_GRAPH,
    SKIP_NO_SNAPSHOT,
    SKIP_NOT_A_COLLECTION,
    SKIP_UNCHANGED,
    SyncResult,
    SyncSession,
)

__all__ = [
    "DiffStats",
    "SKIP_MALFORMED",
    "SKIP_NOT_A_COLLECTION",
    "SKIP_NO_MATCHING_GRAPH",
    "SKIP_NO_SNAPSHOT",
    "SKIP_UNCHANGED",
    "SyncResult",
    "SyncSession",
    "apply_edges",
    "apply_nodes",
    "build_render_edge",
    "build_render_node",
]
