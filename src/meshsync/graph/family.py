"""Address-family filter: choose the active graph of a collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from meshsync.settings import AddressFamily
from meshsync.snapshot.types import NetworkGraph

if TYPE_CHECKING:
    from meshsync.snapshot.types import NetworkCollection


def family_of(router_id: str) -> AddressFamily | None:
    """Guess the address family of a router id.

    Ids containing ``:`` are IPv6, ids containing ``.`` are IPv4, anything
    else is undetermined and matches either preference.
    """
    if ":" in router_id:
        return AddressFamily.IPV6
    if "." in router_id:
        return AddressFamily.IPV4
    return None


def matches_family(router_id: str, family: AddressFamily) -> bool:
    if family is AddressFamily.IPV4:
        return ":" not in router_id
    return "." not in router_id


def select_graph(collection: NetworkCollection, family: AddressFamily) -> NetworkGraph | None:
    """Return the first NetworkGraph of *collection* whose router id fits *family*.

    Non-graph entries are skipped. Later matching graphs are ignored.

    Returns:
        The active graph, or None if no entry matches
    """
    for entry in collection.collection:
        if not isinstance(entry, NetworkGraph):
            continue
        if matches_family(entry.router_id, family):
            return entry
    return None
