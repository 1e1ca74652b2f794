"""Graph normalization: address-family selection and edge canonicalization."""

from meshsync.graph.canonical import (
    UNSET_LABEL,
    ArrowDirection,
    CanonicalEdge,
    EdgeKey,
    canonical_pair,
    canonicalize_links,
    edge_label,
    format_weight,
)
from meshsync.graph.family import family_of, matches_family, select_graph

__all__ = [
    "UNSET_LABEL",
    "ArrowDirection",
    "CanonicalEdge",
    "EdgeKey",
    "canonical_pair",
    "canonicalize_links",
    "edge_label",
    "family_of",
    "format_weight",
    "matches_family",
    "select_graph",
]
