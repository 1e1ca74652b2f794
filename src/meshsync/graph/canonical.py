"""Edge canonicalizer: collapse directed links into undirected labelled edges.

Each pair of nodes is keyed by its sorted endpoints, so the links ``A→B``
and ``B→A`` merge into one edge. The label of the link leaving the smaller
id goes into ``from_label``, the one leaving the larger id into
``to_label``; the display label joins both.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from meshsync._utils import has_suffix

if TYPE_CHECKING:
    from collections.abc import Iterable

    from meshsync.snapshot.types import LinkSpec

# Label of a direction no link has reported
UNSET_LABEL = "-"

DEFAULT_WIDTH = 1
TREE_WIDTH = 3

EdgeKey = tuple[str, str]


class ArrowDirection(Enum):
    """Arrow drawn on an undirected edge (values are vis.js ``arrows`` strings).

    Values:
        NONE: No arrow.
        TO: Points toward the larger endpoint id.
        FROM: Points toward the smaller endpoint id.
    """

    NONE = ""
    TO = "to"
    FROM = "from"


def canonical_pair(source: str, target: str) -> EdgeKey:
    """Order-independent key of the edge between *source* and *target*.

    Examples:
        >>> canonical_pair("b", "a")
        ('a', 'b')
        >>> canonical_pair("a", "b") == canonical_pair("b", "a")
        True
    """
    if source > target:
        return (target, source)
    return (source, target)


def format_weight(weight: int | float | str) -> str:
    """Render a link weight the way JavaScript prints numbers.

    Examples:
        >>> format_weight(5.0)
        '5'
        >>> format_weight(2.5)
        '2.5'
        >>> format_weight("10Mbit/s")
        '10Mbit/s'
        >>> format_weight(1e21), format_weight(1e-7)
        ('1e+21', '1e-7')
    """
    if isinstance(weight, str):
        return weight
    if isinstance(weight, float):
        if math.isnan(weight):
            return "NaN"
        if math.isinf(weight):
            return "Infinity" if weight > 0 else "-Infinity"
    if weight == 0:
        return "0"

    # Shortest round-tripping digits, laid out with the ECMAScript Number::toString rules
    sign, digit_tuple, exponent = Decimal(repr(weight)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = exponent + k
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = f"0.{'0' * -n}{digits}"
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return f"-{text}" if sign else text


@dataclass
class CanonicalEdge:
    """Undirected edge accumulated from one or two directed links.

    Attributes:
        from_id: Smaller endpoint id
        to_id: Larger endpoint id
        from_label: Label of the link leaving ``from_id``
        to_label: Label of the link leaving ``to_id``
        width: 3 if any contributing link is part of the outgoing tree, else 1
        arrows: Direction of the last outgoing-tree link seen
    """

    from_id: str
    to_id: str
    from_label: str = UNSET_LABEL
    to_label: str = UNSET_LABEL
    width: int = DEFAULT_WIDTH
    arrows: ArrowDirection = ArrowDirection.NONE

    @property
    def key(self) -> EdgeKey:
        return (self.from_id, self.to_id)

    def add_link(self, link: LinkSpec) -> None:
        """Merge one directed link into this edge (later links overwrite earlier slots)."""
        label = format_weight(link.weight)
        weight_txt = link.properties.get("weight_txt")
        if weight_txt:
            label = str(weight_txt)

        leaves_from = link.source == self.from_id
        if link.properties.get("outgoing_tree") == "true":
            self.width = TREE_WIDTH
            self.arrows = ArrowDirection.TO if leaves_from else ArrowDirection.FROM

        if leaves_from:
            self.from_label = label
        else:
            self.to_label = label

    def label(self, suffix: str = "") -> str:
        return edge_label(self.from_label, self.to_label, suffix)


def edge_label(from_label: str, to_label: str, suffix: str = "") -> str:
    """Join the two directional labels of an edge.

    Equal labels collapse to one value. When both end with *suffix*, the
    suffix is written once after the pair.

    Examples:
        >>> edge_label("5", "5")
        '5'
        >>> edge_label("10Mbit/s", "20Mbit/s", "bit/s")
        '10M/20M bit/s'
        >>> edge_label("7", "-")
        '7/-'
    """
    if from_label == to_label:
        return from_label
    if suffix and has_suffix(from_label, suffix) and has_suffix(to_label, suffix):
        head = from_label[: len(from_label) - len(suffix)].strip()
        tail = to_label[: len(to_label) - len(suffix)].strip()
        return f"{head}/{tail} {suffix}"
    return f"{from_label}/{to_label}"


def canonicalize_links(links: Iterable[LinkSpec]) -> dict[EdgeKey, CanonicalEdge]:
    """Collapse directed *links* into canonical edges, keyed by sorted pair.

    The result preserves first-seen order of the pairs.
    """
    edges: dict[EdgeKey, CanonicalEdge] = {}
    for link in links:
        key = canonical_pair(link.source, link.target)
        edge = edges.get(key)
        if edge is None:
            edge = CanonicalEdge(from_id=key[0], to_id=key[1])
            edges[key] = edge
        edge.add_link(link)
    return edges
