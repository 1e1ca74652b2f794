"""Event system for observing sync sessions."""

from meshsync.events.dispatcher import EventDispatcher
from meshsync.events.processor import EventProcessor, TypedEventProcessor
from meshsync.events.types import (
    BaseEvent,
    Event,
    FetchErrorEvent,
    PollToggledEvent,
    SyncEndEvent,
    SyncStartEvent,
    SyncStatus,
    SyncTrigger,
)

__all__ = [
    # Event types
    "BaseEvent",
    "Event",
    "FetchErrorEvent",
    "PollToggledEvent",
    "SyncEndEvent",
    "SyncStartEvent",
    "SyncStatus",
    "SyncTrigger",
    # Processor interfaces
    "EventProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
