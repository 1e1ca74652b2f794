"""NetJSON snapshot data model and parser.

A snapshot is a tagged union discriminated by the NetJSON ``type`` field.
Only ``NetworkCollection`` is consumed by a sync pass; ``NetworkGraph``
entries inside it are the candidates for the address-family filter. Other
recognized NetJSON objects are kept as ``OtherObject`` so they can be
skipped, and unrecognized types are rejected.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from meshsync.exceptions import MalformedSnapshotError

NETWORK_COLLECTION = "NetworkCollection"
NETWORK_GRAPH = "NetworkGraph"

# NetJSON object types that are valid but never synced
OTHER_OBJECT_TYPES = frozenset({"NetworkRoutes", "DeviceConfiguration", "DeviceMonitoring"})


@dataclass(frozen=True)
class NodeSpec:
    """A node of a NetworkGraph.

    Attributes:
        id: Node identifier (usually an address)
        label: Optional human-readable label sent by the daemon
        properties: Additional node properties
    """

    id: str
    label: str | None = None
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LinkSpec:
    """A directed link of a NetworkGraph.

    Attributes:
        source: Id of the node the link starts at
        target: Id of the node the link points to
        weight: Link metric, a number or a preformatted string
        properties: Additional link properties; ``weight_txt`` and
            ``outgoing_tree`` are used by the edge canonicalizer
    """

    source: str
    target: str
    weight: int | float | str
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NetworkGraph:
    """A routing graph as seen from one router.

    Attributes:
        router_id: Id of the locally-owned node
        nodes: Nodes of the graph, in payload order
        links: Directed links of the graph, in payload order
        protocol: Routing protocol name, if given
        version: Protocol version, if given
        metric: Metric name, if given
        label: Graph label, if given
    """

    router_id: str
    nodes: tuple[NodeSpec, ...] = ()
    links: tuple[LinkSpec, ...] = ()
    protocol: str | None = None
    version: str | None = None
    metric: str | None = None
    label: str | None = None

    type = NETWORK_GRAPH


@dataclass(frozen=True)
class OtherObject:
    """A recognized NetJSON object that carries no graph (e.g. NetworkRoutes)."""

    type: str


@dataclass(frozen=True)
class NetworkCollection:
    """An ordered collection of NetJSON objects."""

    collection: tuple[NetworkGraph | OtherObject, ...] = ()

    type = NETWORK_COLLECTION

    @property
    def graphs(self) -> tuple[NetworkGraph, ...]:
        return tuple(entry for entry in self.collection if isinstance(entry, NetworkGraph))


Snapshot = NetworkCollection | NetworkGraph | OtherObject


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _require(obj: Mapping[str, Any], key: str, kind: type | tuple[type, ...], path: str) -> Any:
    if key not in obj:
        raise MalformedSnapshotError(f"missing '{key}'", path=path)
    value = obj[key]
    if isinstance(value, bool) or not isinstance(value, kind):
        raise MalformedSnapshotError(f"'{key}' has unexpected type {type(value).__name__}", path=path)
    return value


def _optional_str(obj: Mapping[str, Any], key: str) -> str | None:
    value = obj.get(key)
    if value is None:
        return None
    return str(value)


def _properties(obj: Mapping[str, Any], path: str) -> Mapping[str, Any]:
    value = obj.get("properties")
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MalformedSnapshotError("'properties' must be an object", path=path)
    return dict(value)


def _sequence(obj: Mapping[str, Any], key: str, path: str) -> list[Any]:
    value = obj.get(key, [])
    if not isinstance(value, list):
        raise MalformedSnapshotError(f"'{key}' must be an array", path=path)
    return value


def _parse_node(data: Any, path: str) -> NodeSpec:
    if not isinstance(data, Mapping):
        raise MalformedSnapshotError("node must be an object", path=path)
    return NodeSpec(
        id=_require(data, "id", str, path),
        label=_optional_str(data, "label"),
        properties=_properties(data, path),
    )


def _parse_link(data: Any, path: str) -> LinkSpec:
    if not isinstance(data, Mapping):
        raise MalformedSnapshotError("link must be an object", path=path)
    return LinkSpec(
        source=_require(data, "source", str, path),
        target=_require(data, "target", str, path),
        weight=_require(data, "weight", (int, float, str), path),
        properties=_properties(data, path),
    )


def _parse_graph(data: Mapping[str, Any], path: str) -> NetworkGraph:
    nodes = _sequence(data, "nodes", path)
    links = _sequence(data, "links", path)
    return NetworkGraph(
        router_id=_require(data, "router_id", str, path),
        nodes=tuple(_parse_node(n, f"{path}.nodes[{i}]") for i, n in enumerate(nodes)),
        links=tuple(_parse_link(link, f"{path}.links[{i}]") for i, link in enumerate(links)),
        protocol=_optional_str(data, "protocol"),
        version=_optional_str(data, "version"),
        metric=_optional_str(data, "metric"),
        label=_optional_str(data, "label"),
    )


def _parse_object(data: Any, path: str, *, nested: bool) -> Snapshot:
    if not isinstance(data, Mapping):
        raise MalformedSnapshotError("expected a JSON object", path=path)
    kind = data.get("type")
    if kind == NETWORK_GRAPH:
        return _parse_graph(data, path)
    if kind in OTHER_OBJECT_TYPES:
        return OtherObject(type=kind)
    if kind == NETWORK_COLLECTION:
        if nested:
            raise MalformedSnapshotError("nested NetworkCollection", path=path)
        entries = _sequence(data, "collection", path)
        return NetworkCollection(
            collection=tuple(
                _parse_object(entry, f"{path}.collection[{i}]", nested=True) for i, entry in enumerate(entries)
            )
        )
    raise MalformedSnapshotError(f"unrecognized type {kind!r}", path=path)


def parse_snapshot(payload: Any) -> Snapshot:
    """Parse a decoded JSON payload (or raw JSON text/bytes) into a Snapshot.

    Args:
        payload: Decoded JSON value, JSON text, or JSON bytes

    Returns:
        The parsed snapshot variant

    Raises:
        MalformedSnapshotError: If the payload is not valid NetJSON

    Example:
        >>> snap = parse_snapshot('{"type": "NetworkCollection", "collection": []}')
        >>> snap.graphs
        ()
    """
    if isinstance(payload, (NetworkCollection, NetworkGraph, OtherObject)):
        return payload
    if isinstance(payload, (str, bytes, bytearray)):
        payload = decode_json(payload)
    return _parse_object(payload, "$", nested=False)


def decode_json(raw: str | bytes | bytearray) -> Any:
    """Decode JSON text, converting decode failures to MalformedSnapshotError."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedSnapshotError(f"invalid JSON: {e}") from e
