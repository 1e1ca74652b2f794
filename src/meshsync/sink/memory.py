"""Dict-backed render sink.

Mirrors the behaviour of a vis.js DataSet: adding an existing key or
updating/removing a missing one is an error, and listeners are notified of
every mutation so a widget can redraw.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

import networkx as nx

from meshsync.sink.base import RenderSink

if TYPE_CHECKING:
    from meshsync.graph.canonical import EdgeKey
    from meshsync.sink.records import RenderEdge, RenderNode

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")

Action = Literal["add", "update", "remove"]
Listener = Callable[[Action, Any, Any], None]


class InMemoryStore(Generic[K, R]):
    """Insertion-ordered record store with mutation counting.

    Args:
        name: Store name used in error messages ("nodes" or "edges")

    Example:
        >>> store = InMemoryStore("nodes")
        >>> store.add("a", 1)
        >>> store.has("a"), store.mutations
        (True, 1)
    """

    def __init__(self, name: str = "records") -> None:
        self.name = name
        self._data: dict[K, R] = {}
        self._listeners: list[Listener] = []
        self.mutations = 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener(action, key, record)* after every mutation.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self, action: Action, key: K, record: R | None) -> None:
        self.mutations += 1
        for listener in self._listeners:
            try:
                listener(action, key, record)
            except Exception:
                logger.warning("Listener %r failed on %s %s", listener, action, self.name, exc_info=True)

    def add(self, key: K, record: R) -> None:
        if key in self._data:
            raise KeyError(f"{self.name}: cannot add duplicate id {key!r}")
        self._data[key] = record
        self._notify("add", key, record)

    def update(self, key: K, record: R) -> None:
        if key not in self._data:
            raise KeyError(f"{self.name}: cannot update unknown id {key!r}")
        self._data[key] = record
        self._notify("update", key, record)

    def remove(self, key: K) -> None:
        if key not in self._data:
            raise KeyError(f"{self.name}: cannot remove unknown id {key!r}")
        del self._data[key]
        self._notify("remove", key, None)

    def get(self, key: K) -> R | None:
        return self._data.get(key)

    def has(self, key: K) -> bool:
        return key in self._data

    def ids(self) -> set[K]:
        return set(self._data)

    def values(self) -> list[R]:
        return list(self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


class InMemoryRenderSink(RenderSink):
    """Render sink keeping nodes and edges in two InMemoryStores."""

    nodes: InMemoryStore[str, RenderNode]
    edges: InMemoryStore[EdgeKey, RenderEdge]

    def __init__(self) -> None:
        super().__init__(InMemoryStore("nodes"), InMemoryStore("edges"))

    @property
    def mutations(self) -> int:
        """Total number of add/update/remove calls on both stores."""
        return self.nodes.mutations + self.edges.mutations

    def to_vis(self) -> dict[str, list[dict[str, Any]]]:
        """Current contents as vis.js DataSet items."""
        return {
            "nodes": [node.to_vis() for node in self.nodes.values()],
            "edges": [edge.to_vis() for edge in self.edges.values()],
        }

    def to_networkx(self) -> nx.Graph:
        """Current contents as an undirected NetworkX graph.

        Node and edge attributes carry the render records. Edges whose
        endpoints are not in the node store still appear, with bare
        endpoint nodes.
        """
        graph = nx.Graph()
        for node in self.nodes.values():
            graph.add_node(node.id, label=node.label, emphasis=node.emphasis)
        for edge in self.edges.values():
            graph.add_edge(
                edge.from_id,
                edge.to_id,
                label=edge.label,
                width=edge.width,
                arrows=edge.arrows.value,
            )
        return graph
