"""NetJSON snapshot model, parser and sources."""

from meshsync.snapshot.source import (
    FileSnapshotSource,
    HttpSnapshotSource,
    SnapshotSource,
    source_for,
)
from meshsync.snapshot.types import (
    LinkSpec,
    NetworkCollection,
    NetworkGraph,
    NodeSpec,
    OtherObject,
    Snapshot,
    parse_snapshot,
)

__all__ = [
    # Data model
    "LinkSpec",
    "NetworkCollection",
    "NetworkGraph",
    "NodeSpec",
    "OtherObject",
    "Snapshot",
    "parse_snapshot",
    # Sources
    "FileSnapshotSource",
    "HttpSnapshotSource",
    "SnapshotSource",
    "source_for",
]
