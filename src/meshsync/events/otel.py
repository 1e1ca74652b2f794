"""OpenTelemetry export processor: converts sync events to OTel spans.

Opt-in via::

    pip install meshsync[otel]

Usage::

    from meshsync.events.otel import OpenTelemetryProcessor

    session = SyncSession(sink, processors=[OpenTelemetryProcessor()])

Each sync pass becomes one span. Fetch failures and poll toggles are
recorded as span events on a long-lived session span.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from meshsync.events.processor import TypedEventProcessor
from meshsync.events.types import SyncStatus

if TYPE_CHECKING:
    from meshsync.events.types import (
        FetchErrorEvent,
        PollToggledEvent,
        SyncEndEvent,
        SyncStartEvent,
    )


def _require_opentelemetry() -> None:
    """Raise a clear error if opentelemetry is not installed."""
    try:
        import opentelemetry  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'opentelemetry' package is required for OpenTelemetryProcessor. "
            "Install with: pip install 'meshsync[otel]' "
            "or: pip install opentelemetry-api opentelemetry-sdk"
        ) from None


class OpenTelemetryProcessor(TypedEventProcessor):
    """Converts sync events to OpenTelemetry spans.

    Mapping:
        first event        → session span (``session:{session_id}``)
        SyncStartEvent     → child span (``sync:{trigger}``)
        SyncEndEvent       → end child span with mutation counts
        FetchErrorEvent    → span event on the session span
        PollToggledEvent   → span event on the session span
        shutdown           → end session span
    """

    def __init__(self, tracer_name: str = "meshsync", *, tracer_provider: Any = None) -> None:
        _require_opentelemetry()
        from opentelemetry import trace
        from opentelemetry.trace import StatusCode

        self._tracer = trace.get_tracer(tracer_name, tracer_provider=tracer_provider)
        self._trace = trace
        self._StatusCode = StatusCode
        self._session_spans: dict[str, Any] = {}  # session_id → OTel Span
        self._spans: dict[str, Any] = {}  # span_id → OTel Span

    def _session_span(self, session_id: str) -> Any:
        span = self._session_spans.get(session_id)
        if span is None:
            span = self._tracer.start_span(
                name=f"session:{session_id}",
                attributes={"meshsync.session_id": session_id},
            )
            self._session_spans[session_id] = span
        return span

    def on_sync_start(self, event: SyncStartEvent) -> None:
        parent = self._session_span(event.session_id)
        span = self._tracer.start_span(
            name=f"sync:{event.trigger.value}",
            context=self._trace.set_span_in_context(parent),
            attributes={
                "meshsync.session_id": event.session_id,
                "meshsync.trigger": event.trigger.value,
                "meshsync.address_family": event.address_family,
            },
        )
        self._spans[event.span_id] = span

    def on_sync_end(self, event: SyncEndEvent) -> None:
        span = self._spans.pop(event.span_id, None)
        if span is None:
            return
        span.set_attribute("meshsync.status", event.status.value)
        span.set_attribute("meshsync.duration_ms", event.duration_ms)
        span.set_attribute("meshsync.mutations", event.mutations)
        if event.root_id is not None:
            span.set_attribute("meshsync.root_id", event.root_id)
        if event.status == SyncStatus.SKIPPED and event.reason:
            span.set_attribute("meshsync.skip_reason", event.reason)
        span.end()

    def on_fetch_error(self, event: FetchErrorEvent) -> None:
        self._session_span(event.session_id).add_event(
            "fetch_error",
            attributes={"source": event.source, "error": event.error, "error_type": event.error_type},
        )

    def on_poll_toggled(self, event: PollToggledEvent) -> None:
        self._session_span(event.session_id).add_event(
            "poll_toggled",
            attributes={"enabled": event.enabled, "interval_ms": event.interval_ms},
        )

    def shutdown(self) -> None:
        """End any remaining open spans, then the session spans."""
        for span in self._spans.values():
            span.set_status(self._StatusCode.ERROR, "session closed during sync")
            span.end()
        self._spans.clear()
        for span in self._session_spans.values():
            span.end()
        self._session_spans.clear()
