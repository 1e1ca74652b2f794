"""Node and edge diff appliers.

Both appliers bring one half of a render sink up to date with the records
derived from a snapshot: absent records are added, changed records are
updated in place, and records no longer present are removed last.
Unchanged records are not touched, so re-applying the same snapshot does
not mutate the sink.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from meshsync._utils import strip_prefix
from meshsync.sink.records import RenderEdge, RenderNode

if TYPE_CHECKING:
    from meshsync.graph.canonical import CanonicalEdge, EdgeKey
    from meshsync.sink.base import RecordStore
    from meshsync.snapshot.types import NodeSpec


@dataclass(frozen=True)
class DiffStats:
    """Mutation counts of one applier run."""

    added: int = 0
    updated: int = 0
    removed: int = 0

    @property
    def mutations(self) -> int:
        return self.added + self.updated + self.removed

    def __str__(self) -> str:
        return f"+{self.added} ~{self.updated} -{self.removed}"


def build_render_node(
    spec: NodeSpec,
    *,
    root_id: str,
    prefix: str = "",
    highlight: Mapping[str, Any] | None = None,
) -> RenderNode:
    emphasis = spec.id == root_id
    return RenderNode(
        id=spec.id,
        label=strip_prefix(spec.id, prefix),
        emphasis=emphasis,
        color=highlight if emphasis else None,
    )


def build_render_edge(edge: CanonicalEdge, *, suffix: str = "") -> RenderEdge:
    return RenderEdge(
        id=edge.key,
        from_id=edge.from_id,
        to_id=edge.to_id,
        label=edge.label(suffix),
        width=edge.width,
        arrows=edge.arrows,
    )


def _remove_stale(store: RecordStore, current: set) -> int:
    removed = 0
    for key in store.ids() - current:
        store.remove(key)
        removed += 1
    return removed


def apply_nodes(
    store: RecordStore[str, RenderNode],
    nodes: Iterable[NodeSpec],
    *,
    root_id: str,
    prefix: str = "",
    highlight: Mapping[str, Any] | None = None,
) -> DiffStats:
    """Reconcile the node store with *nodes*.

    Membership drives the diff. An existing record is only rewritten when
    its label or emphasis changed, e.g. after the root or prefix changed.

    Args:
        store: Node half of the render sink
        nodes: Node specs of the active graph
        root_id: Router id of the active graph (emphasized node)
        prefix: Prefix stripped from display labels
        highlight: Render hint attached to the emphasized node

    Returns:
        DiffStats with the number of added, updated and removed nodes
    """
    current: set[str] = set()
    added = updated = 0
    for spec in nodes:
        if spec.id in current:
            continue
        current.add(spec.id)
        record = build_render_node(spec, root_id=root_id, prefix=prefix, highlight=highlight)
        existing = store.get(spec.id)
        if existing is None:
            store.add(spec.id, record)
            added += 1
        elif existing != record:
            store.update(spec.id, record)
            updated += 1

    removed = _remove_stale(store, current)
    return DiffStats(added=added, updated=updated, removed=removed)


def apply_edges(
    store: RecordStore[EdgeKey, RenderEdge],
    edges: Mapping[EdgeKey, CanonicalEdge],
    *,
    suffix: str = "",
) -> DiffStats:
    """Reconcile the edge store with the canonical *edges*.

    Edge content (label, width, arrows) follows every snapshot; records
    whose content did not change are left alone.

    Returns:
        DiffStats with the number of added, updated and removed edges
    """
    added = updated = 0
    for key, edge in edges.items():
        record = build_render_edge(edge, suffix=suffix)
        existing = store.get(key)
        if existing is None:
            store.add(key, record)
            added += 1
        elif existing != record:
            store.update(key, record)
            updated += 1

    removed = _remove_stale(store, set(edges))
    return DiffStats(added=added, updated=updated, removed=removed)
