"""Viewer settings and the override-merge rule used to build them."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any

from meshsync.exceptions import SettingsError

logger = logging.getLogger(__name__)


class AddressFamily(Enum):
    """Address family selecting which graph of a collection is active.

    Values:
        IPV4: Prefer graphs whose router id is an IPv4 address.
        IPV6: Prefer graphs whose router id is an IPv6 address.
    """

    IPV4 = "ipv4"
    IPV6 = "ipv6"


def _default_node_prefix() -> dict[str, str]:
    return {"ipv4": "", "ipv6": ""}


def _default_root_highlight() -> dict[str, Any]:
    return {
        "border": "#2BE97C",
        "background": "#D2FFE5",
        "highlight": {
            "border": "#2BE97C",
            "background": "#D2FFE5",
        },
    }


@dataclass(frozen=True)
class ViewerSettings:
    """Settings that influence fetching and diffing of topology snapshots.

    Attributes:
        url: Snapshot URL or file path polled by the CLI (None if unset)
        address_family: Which graph of a collection is active
        node_prefix: Per-family prefix stripped from node display labels
        edge_suffix: Unit suffix collapsed when both edge labels share it
        poll_interval_ms: Delay between the end of one fetch and the next
        poll_enabled: Whether the poll loop reschedules itself
        root_highlight: Render hint applied to the root node (vis.js color object)
    """

    url: str | None = None
    address_family: AddressFamily = AddressFamily.IPV4
    node_prefix: dict[str, str] = field(default_factory=_default_node_prefix)
    edge_suffix: str = ""
    poll_interval_ms: int = 5000
    poll_enabled: bool = True
    root_highlight: dict[str, Any] = field(default_factory=_default_root_highlight)

    def __post_init__(self) -> None:
        if isinstance(self.address_family, str):
            try:
                object.__setattr__(self, "address_family", AddressFamily(self.address_family))
            except ValueError:
                raise SettingsError("address_family", self.address_family) from None
        interval = self.poll_interval_ms
        if isinstance(interval, bool) or not isinstance(interval, int):
            raise SettingsError(
                "poll_interval_ms",
                interval,
                f"poll_interval_ms must be an integer, got {interval!r}",
            )
        if interval <= 0:
            raise SettingsError(
                "poll_interval_ms",
                interval,
                f"poll_interval_ms must be positive, got {interval}",
            )

    def prefix_for(self, family: AddressFamily | None = None) -> str:
        """Node label prefix for *family* (defaults to the active family)."""
        family = family or self.address_family
        return self.node_prefix.get(family.value, "")

    def with_changes(self, **changes: Any) -> ViewerSettings:
        """Return a copy with *changes* applied (validated like the constructor)."""
        return replace(self, **changes)

    def to_mapping(self) -> dict[str, Any]:
        data = asdict(self)
        data["address_family"] = self.address_family.value
        return data

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None = None) -> ViewerSettings:
        """Build settings by merging *overrides* onto the defaults.

        See ``merge_settings`` for the merge rule.

        Example:
            >>> s = ViewerSettings.from_mapping({"edge_suffix": "bit/s", "poll_interval_ms": "fast"})
            >>> s.edge_suffix, s.poll_interval_ms
            ('bit/s', 5000)
        """
        return cls().merged(overrides)

    def merged(self, overrides: Mapping[str, Any] | None) -> ViewerSettings:
        """Return a copy of these settings with *overrides* merged in."""
        data = self.to_mapping()
        if overrides:
            merge_settings(data, overrides)
        return type(self)(**data)


def merge_settings(target: dict[str, Any], overrides: Mapping[str, Any], *, _path: str = "") -> None:
    """Merge *overrides* into *target* in place.

    Only keys already present in *target* are considered. A value whose type
    differs from a non-None target value is ignored, nested mappings merge
    recursively, and everything else is assigned.
    """
    for key, current in target.items():
        if key not in overrides:
            continue
        value = overrides[key]
        name = f"{_path}{key}"
        if current is not None and type(value) is not type(current):
            if not (isinstance(current, dict) and isinstance(value, Mapping)):
                logger.warning(
                    "Ignoring setting %s: expected %s, got %s",
                    name,
                    type(current).__name__,
                    type(value).__name__,
                )
                continue
        if value is not None and isinstance(current, dict) and isinstance(value, Mapping):
            merge_settings(current, value, _path=f"{name}.")
        else:
            target[key] = copy.deepcopy(value)
