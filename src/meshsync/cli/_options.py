"""Options shared by the show and watch commands."""

from __future__ import annotations

from typing import Annotated, Any

import typer

from meshsync.cli._config import load_config
from meshsync.exceptions import SettingsError
from meshsync.settings import AddressFamily, ViewerSettings

IPv6Option = Annotated[
    bool | None,
    typer.Option("--ipv6/--ipv4", help="Show the IPv6 or the IPv4 graph (default from config: ipv4)"),
]
PrefixOption = Annotated[
    str | None,
    typer.Option("--prefix", help="Prefix stripped from node labels of the active address family"),
]
SuffixOption = Annotated[
    str | None,
    typer.Option("--suffix", help="Unit suffix shared by both labels of an edge, e.g. 'bit/s'"),
]


def resolve_settings(
    *,
    ipv6: bool | None = None,
    prefix: str | None = None,
    suffix: str | None = None,
    **changes: Any,
) -> ViewerSettings:
    """Project config from pyproject.toml, overridden by command-line options."""
    try:
        settings = load_config()
        if ipv6 is not None:
            changes["address_family"] = AddressFamily.IPV6 if ipv6 else AddressFamily.IPV4
        if suffix is not None:
            changes["edge_suffix"] = suffix
        if prefix is not None:
            family = changes.get("address_family", settings.address_family)
            changes["node_prefix"] = {**settings.node_prefix, family.value: prefix}
        return settings.with_changes(**changes)
    except SettingsError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e
