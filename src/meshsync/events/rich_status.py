"""Rich-based status lines for sync sessions."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from meshsync.events.processor import TypedEventProcessor
from meshsync.events.types import SyncStatus

if TYPE_CHECKING:
    from meshsync.events.types import FetchErrorEvent, PollToggledEvent, SyncEndEvent


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'rich' package is required for RichStatusProcessor. Install it with: pip install 'meshsync[progress]' or pip install rich"
        ) from None


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _timestamp() -> str:
    """Return current time as [HH:MM:SS]."""
    return datetime.now().strftime("[%H:%M:%S]")


def _summary(event: SyncEndEvent) -> str:
    nodes = f"nodes +{event.nodes_added} ~{event.nodes_updated} -{event.nodes_removed}"
    edges = f"edges +{event.edges_added} ~{event.edges_updated} -{event.edges_removed}"
    return f"{nodes}, {edges} ({event.duration_ms:.1f}ms)"


class RichStatusProcessor(TypedEventProcessor):
    """Prints one status line per sync pass, fetch failure and poll toggle.

    In TTY mode lines go through a Rich console with colour. In non-TTY
    environments (CI, piped output) it falls back to plain timestamped
    lines.

    Args:
        quiet_unchanged: Do not report passes that changed nothing.
        force_mode: Force TTY or non-TTY mode. "auto" detects via isatty().
    """

    def __init__(
        self,
        *,
        quiet_unchanged: bool = False,
        force_mode: Literal["tty", "non-tty", "auto"] = "auto",
    ) -> None:
        if force_mode == "auto":
            self._tty_mode = _is_tty()
        else:
            self._tty_mode = force_mode == "tty"
        self._quiet_unchanged = quiet_unchanged
        self.passes = 0

        self._console: Any = None
        if self._tty_mode:
            _require_rich()
            from rich.console import Console

            self._console = Console()

    def _print(self, markup: str, plain: str) -> None:
        if self._tty_mode:
            self._console.print(f"[dim]{_timestamp()}[/dim] {markup}")
        else:
            print(f"{_timestamp()} {plain}", flush=True)

    def on_sync_end(self, event: SyncEndEvent) -> None:
        self.passes += 1
        if event.status == SyncStatus.SKIPPED:
            reason = event.reason or "unknown"
            self._print(f"[yellow]skipped[/yellow] ({reason})", f"skipped ({reason})")
            return
        if self._quiet_unchanged and event.mutations == 0:
            return
        root = event.root_id or "?"
        summary = _summary(event)
        self._print(f"[green]synced[/green] [bold]{root}[/bold] {summary}", f"synced {root} {summary}")

    def on_fetch_error(self, event: FetchErrorEvent) -> None:
        self._print(f"[red]fetch failed[/red] {event.error}", f"fetch failed: {event.error}")

    def on_poll_toggled(self, event: PollToggledEvent) -> None:
        if event.enabled:
            msg = f"polling every {event.interval_ms}ms"
        else:
            msg = "polling paused"
        self._print(f"[cyan]{msg}[/cyan]", msg)
