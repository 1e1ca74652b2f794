"""meshsync CLI: inspect and watch NetJSON topology snapshots.

Entry point for the `meshsync` command. Requires ``pip install meshsync[cli]``.

Commands:
    show    Apply one snapshot file and print nodes and merged edges
    watch   Poll a URL or file and report what each sync pass changed
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install meshsync[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from meshsync.cli.show_cmd import register_commands as register_show
    from meshsync.cli.watch_cmd import register_commands as register_watch

    app = typer.Typer(
        name="meshsync",
        help="Sync and inspect NetJSON network topology snapshots.",
        no_args_is_help=True,
    )
    register_show(app)
    register_watch(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
