"""Render sink interface.

A render sink is the mutable node/edge store owned by a visualization
widget. It is only ever mutated record by record through ``add``,
``update`` and ``remove``; the diff appliers never rebuild it.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from meshsync.graph.canonical import EdgeKey
    from meshsync.sink.records import RenderEdge, RenderNode

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


class RecordStore(Protocol[K, R]):
    """Protocol for one half (nodes or edges) of a render sink.

    Implementations must provide the six methods below. ``add`` is only
    called for absent keys and ``update``/``remove`` only for present ones.
    """

    def add(self, key: K, record: R) -> None:
        """Insert a new record."""
        ...

    def update(self, key: K, record: R) -> None:
        """Replace an existing record in place."""
        ...

    def remove(self, key: K) -> None:
        """Delete an existing record."""
        ...

    def get(self, key: K) -> R | None:
        """Return the stored record, or None."""
        ...

    def has(self, key: K) -> bool:
        """Return True if a record is stored under *key*."""
        ...

    def ids(self) -> set[K]:
        """Return a snapshot of all stored keys."""
        ...


class RenderSink:
    """Pairs a node store with an edge store.

    Args:
        nodes: Store for RenderNode records, keyed by node id
        edges: Store for RenderEdge records, keyed by canonical pair
    """

    def __init__(
        self,
        nodes: RecordStore[str, RenderNode],
        edges: RecordStore[EdgeKey, RenderEdge],
    ) -> None:
        self.nodes = nodes
        self.edges = edges

    def node_ids(self) -> set[str]:
        return self.nodes.ids()

    def edge_ids(self) -> set[EdgeKey]:
        return self.edges.ids()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={len(self.node_ids())}, edges={len(self.edge_ids())})"
