"""Render records stored in a render sink."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from meshsync.graph.canonical import DEFAULT_WIDTH, ArrowDirection, EdgeKey

NODE_MASS = 4
EDGE_LENGTH = 200


@dataclass(frozen=True)
class RenderNode:
    """A node as handed to the visualization widget.

    Attributes:
        id: Node id from the snapshot
        label: Display label (id without the family prefix)
        emphasis: True for the root node of the active graph
        color: Highlight style for emphasized nodes, None otherwise
    """

    id: str
    label: str
    emphasis: bool = False
    color: Mapping[str, Any] | None = None

    def to_vis(self) -> dict[str, Any]:
        """vis.js DataSet item for this node."""
        return {
            "id": self.id,
            "label": self.label,
            "mass": NODE_MASS,
            "color": dict(self.color) if self.color is not None else None,
        }


@dataclass(frozen=True)
class RenderEdge:
    """An undirected edge as handed to the visualization widget.

    Attributes:
        id: Canonical (sorted) endpoint pair
        from_id: Smaller endpoint id
        to_id: Larger endpoint id
        label: Merged display label
        width: Line width
        arrows: Arrow direction
    """

    id: EdgeKey
    from_id: str
    to_id: str
    label: str
    width: int = DEFAULT_WIDTH
    arrows: ArrowDirection = ArrowDirection.NONE

    @property
    def vis_id(self) -> str:
        return f"{self.from_id}-{self.to_id}"

    def to_vis(self) -> dict[str, Any]:
        """vis.js DataSet item for this edge."""
        return {
            "id": self.vis_id,
            "from": self.from_id,
            "to": self.to_id,
            "label": self.label,
            "length": EDGE_LENGTH,
            "width": self.width,
            "arrows": self.arrows.value,
            "font": {"align": "top"},
        }
