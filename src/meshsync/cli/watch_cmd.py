"""`meshsync watch`: poll a snapshot source and report every sync pass."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

import typer

from meshsync.cli._options import IPv6Option, PrefixOption, SuffixOption, resolve_settings
from meshsync.events.processor import TypedEventProcessor
from meshsync.events.rich_status import RichStatusProcessor
from meshsync.settings import ViewerSettings
from meshsync.sink.memory import InMemoryRenderSink
from meshsync.snapshot.source import source_for
from meshsync.sync.session import SyncSession


class _TickCounter(TypedEventProcessor):
    """Sets *done* after *limit* poll ticks (sync passes or fetch failures)."""

    def __init__(self, limit: int | None, done: asyncio.Event) -> None:
        self.limit = limit
        self.ticks = 0
        self._done = done

    def _tick(self) -> None:
        self.ticks += 1
        if self.limit is not None and self.ticks >= self.limit:
            self._done.set()

    def on_sync_end(self, event):
        self._tick()

    def on_fetch_error(self, event):
        self._tick()


def register_commands(app: typer.Typer) -> None:
    """Register `watch` on the top-level app."""
    app.command("watch")(watch)


async def run_watch(location: str, settings: ViewerSettings, *, count: int | None = None, quiet: bool = False) -> int:
    """Poll *location* until *count* ticks happened (forever if None).

    Returns:
        Number of ticks observed
    """
    source = source_for(location)
    done = asyncio.Event()
    counter = _TickCounter(count, done)
    session = SyncSession(
        InMemoryRenderSink(),
        settings,
        processors=[RichStatusProcessor(quiet_unchanged=quiet), counter],
    )
    try:
        session.start_polling(source)
        await done.wait()
    finally:
        await session.aclose()
        await source.aclose()
    return counter.ticks


def watch(
    source: Annotated[str | None, typer.Argument(help="Snapshot URL or file (default: [tool.meshsync] url)")] = None,
    interval: Annotated[int | None, typer.Option("--interval", help="Poll interval in milliseconds")] = None,
    ipv6: IPv6Option = None,
    prefix: PrefixOption = None,
    suffix: SuffixOption = None,
    count: Annotated[int | None, typer.Option("--count", help="Stop after N poll ticks")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", help="Do not report passes that changed nothing")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """Poll a NetJSON source and print what every sync pass changed."""
    changes: dict = {"poll_enabled": True}
    if interval is not None:
        changes["poll_interval_ms"] = interval
    settings = resolve_settings(ipv6=ipv6, prefix=prefix, suffix=suffix, **changes)

    location = source or settings.url
    if location is None:
        print("Error: No snapshot source given and no url in [tool.meshsync]")
        raise typer.Exit(1)

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        asyncio.run(run_watch(location, settings, count=count, quiet=quiet))
    except KeyboardInterrupt:
        print("\nStopped.")
