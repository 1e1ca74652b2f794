"""Event types emitted by sync sessions and poll loops."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum


class SyncStatus(Enum):
    """Outcome of a sync pass.

    Values:
        APPLIED: The render sink was reconciled with the snapshot.
        SKIPPED: The pass was skipped and the sink left unchanged.
    """

    APPLIED = "applied"
    SKIPPED = "skipped"


class SyncTrigger(Enum):
    """What caused a sync pass.

    Values:
        SNAPSHOT: A new snapshot arrived.
        SETTINGS: A setting changed and the last snapshot was re-applied.
    """

    SNAPSHOT = "snapshot"
    SETTINGS = "settings"


def _generate_span_id() -> str:
    """Generate a unique span ID."""
    return uuid.uuid4().hex[:16]


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all sync events.

    Attributes:
        session_id: Identifier of the session that produced this event.
        span_id: Unique identifier for this event's scope.
        timestamp: Unix timestamp when the event was created.
    """

    session_id: str
    span_id: str = field(default_factory=_generate_span_id)
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class SyncStartEvent(BaseEvent):
    """Emitted when a sync pass begins.

    Attributes:
        trigger: Why the pass runs.
        address_family: Active address family ("ipv4" or "ipv6").
    """

    trigger: SyncTrigger = SyncTrigger.SNAPSHOT
    address_family: str = "ipv4"


@dataclass(frozen=True)
class SyncEndEvent(BaseEvent):
    """Emitted when a sync pass completes. Shares span_id with its start event.

    Attributes:
        status: Whether the pass was applied or skipped.
        reason: Why the pass was skipped, if it was.
        root_id: Router id of the active graph, if one was selected.
        nodes_added / nodes_updated / nodes_removed: Node mutation counts.
        edges_added / edges_updated / edges_removed: Edge mutation counts.
        duration_ms: Wall-clock duration in milliseconds.
    """

    status: SyncStatus = SyncStatus.APPLIED
    reason: str | None = None
    root_id: str | None = None
    nodes_added: int = 0
    nodes_updated: int = 0
    nodes_removed: int = 0
    edges_added: int = 0
    edges_updated: int = 0
    edges_removed: int = 0
    duration_ms: float = 0.0

    def __post_init__(self) -> None:
        # Coerce string status values to SyncStatus enum
        if isinstance(self.status, str):
            object.__setattr__(self, "status", SyncStatus(self.status))

    @property
    def mutations(self) -> int:
        return (
            self.nodes_added
            + self.nodes_updated
            + self.nodes_removed
            + self.edges_added
            + self.edges_updated
            + self.edges_removed
        )


@dataclass(frozen=True)
class FetchErrorEvent(BaseEvent):
    """Emitted when a poll tick produced no snapshot.

    Attributes:
        source: Description of the snapshot source.
        error: Error message.
        error_type: Fully qualified exception type name.
    """

    source: str = ""
    error: str = ""
    error_type: str = ""


@dataclass(frozen=True)
class PollToggledEvent(BaseEvent):
    """Emitted when polling is switched on or off.

    Attributes:
        enabled: New polling state.
        interval_ms: Poll interval in effect.
    """

    enabled: bool = True
    interval_ms: int = 0


Event = SyncStartEvent | SyncEndEvent | FetchErrorEvent | PollToggledEvent
