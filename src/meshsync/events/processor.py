"""Event processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshsync.events.types import (
        Event,
        FetchErrorEvent,
        PollToggledEvent,
        SyncEndEvent,
        SyncStartEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "SyncStartEvent": "on_sync_start",
    "SyncEndEvent": "on_sync_end",
    "FetchErrorEvent": "on_fetch_error",
    "PollToggledEvent": "on_poll_toggled",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the session is closed. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_sync_start(self, event: SyncStartEvent) -> None: ...
    def on_sync_end(self, event: SyncEndEvent) -> None: ...
    def on_fetch_error(self, event: FetchErrorEvent) -> None: ...
    def on_poll_toggled(self, event: PollToggledEvent) -> None: ...
