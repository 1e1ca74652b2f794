"""`meshsync show`: apply one snapshot file and print the resulting model."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import networkx as nx
import typer

from meshsync.cli._format import edge_rows, node_rows, print_json, print_lines, print_table
from meshsync.cli._options import IPv6Option, PrefixOption, SuffixOption, resolve_settings
from meshsync.sink.memory import InMemoryRenderSink
from meshsync.sync.session import SyncSession


def register_commands(app: typer.Typer) -> None:
    """Register `show` on the top-level app."""
    app.command("show")(show)


def show(
    snapshot: Annotated[Path, typer.Argument(help="NetJSON NetworkCollection file")],
    ipv6: IPv6Option = None,
    prefix: PrefixOption = None,
    suffix: SuffixOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output vis.js nodes/edges as JSON")] = False,
    output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
):
    """Show the render model (nodes and merged edges) a snapshot produces."""
    settings = resolve_settings(ipv6=ipv6, prefix=prefix, suffix=suffix)

    try:
        raw = snapshot.read_bytes()
    except OSError as e:
        print(f"Error: Could not read '{snapshot}': {e}")
        raise typer.Exit(1) from e

    sink = InMemoryRenderSink()
    session = SyncSession(sink, settings)
    result = session.apply_snapshot(raw)
    if not result.applied:
        print(f"Error: Nothing to show for '{snapshot}' ({result.reason})")
        raise typer.Exit(1)

    family = settings.address_family.value
    if as_json:
        data = {"root_id": result.root_id, "address_family": family, **sink.to_vis()}
        print_json("show", data, output)
        return

    graph = sink.to_networkx()
    components = nx.number_connected_components(graph) if graph.number_of_nodes() else 0
    print(
        f"\nGraph: {result.root_id} ({family}) | {len(sink.nodes)} nodes | "
        f"{len(sink.edges)} edges | {components} components\n"
    )

    degrees = dict(graph.degree())
    print_lines(print_table(["Node", "Label", "Role", "Degree"], node_rows(sink.nodes.values(), degrees)))
    print()
    print_lines(print_table(["From", "To", "Label", "Width", "Arrow"], edge_rows(sink.edges.values())))

    print(f"\n  For JSON: meshsync show {snapshot} --json")
