"""Tests for event types, processors and the dispatcher."""

from __future__ import annotations

import logging

import pytest

from meshsync.events import EventDispatcher, EventProcessor, TypedEventProcessor
from meshsync.events.types import (
    FetchErrorEvent,
    PollToggledEvent,
    SyncEndEvent,
    SyncStartEvent,
    SyncStatus,
    SyncTrigger,
)
from tests.builders import EventRecorder

# ---------------------------------------------------------------------------
# Event immutability
# ---------------------------------------------------------------------------


class TestEventTypes:
    def test_frozen_prevents_mutation(self):
        event = SyncStartEvent(session_id="s1")
        with pytest.raises(AttributeError):
            event.address_family = "ipv6"  # type: ignore[misc]

    def test_default_fields(self):
        event = SyncStartEvent(session_id="s1")
        assert event.trigger is SyncTrigger.SNAPSHOT
        assert event.span_id
        assert event.timestamp > 0

    def test_span_ids_are_unique(self):
        assert SyncStartEvent(session_id="s").span_id != SyncStartEvent(session_id="s").span_id

    def test_all_event_types_constructible(self):
        for cls in (SyncStartEvent, SyncEndEvent, FetchErrorEvent, PollToggledEvent):
            assert cls(session_id="s1").session_id == "s1"

    def test_end_status_coerced_from_string(self):
        assert SyncEndEvent(session_id="s1", status="skipped").status is SyncStatus.SKIPPED

    def test_end_mutations(self):
        event = SyncEndEvent(session_id="s1", nodes_added=2, nodes_removed=1, edges_updated=3)
        assert event.mutations == 6


# ---------------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------------


class TestTypedEventProcessor:
    def test_dispatches_by_type(self):
        calls = []

        class Handler(TypedEventProcessor):
            def on_sync_start(self, event):
                calls.append("start")

            def on_sync_end(self, event):
                calls.append("end")

            def on_fetch_error(self, event):
                calls.append("fetch_error")

            def on_poll_toggled(self, event):
                calls.append("poll_toggled")

        handler = Handler()
        for event in (
            SyncStartEvent(session_id="s"),
            SyncEndEvent(session_id="s"),
            FetchErrorEvent(session_id="s"),
            PollToggledEvent(session_id="s"),
        ):
            handler.on_event(event)
        assert calls == ["start", "end", "fetch_error", "poll_toggled"]

    def test_unhandled_events_are_ignored(self):
        TypedEventProcessor().on_event(SyncStartEvent(session_id="s"))

    def test_base_processor_is_a_no_op(self):
        processor = EventProcessor()
        processor.on_event(SyncEndEvent(session_id="s"))
        processor.shutdown()


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class TestEventDispatcher:
    def test_inactive_without_processors(self):
        assert not EventDispatcher().active

    def test_emit_reaches_all_processors(self):
        first, second = EventRecorder(), EventRecorder()
        dispatcher = EventDispatcher([first])
        dispatcher.add(second)
        assert dispatcher.active

        event = SyncStartEvent(session_id="s")
        dispatcher.emit(event)

        assert first.events == [event]
        assert second.events == [event]

    def test_failing_processor_is_logged(self, caplog):
        class Broken(EventProcessor):
            def on_event(self, event):
                raise RuntimeError("boom")

        recorder = EventRecorder()
        dispatcher = EventDispatcher([Broken(), recorder])
        with caplog.at_level(logging.WARNING, logger="meshsync.events.dispatcher"):
            dispatcher.emit(SyncStartEvent(session_id="s"))

        assert len(recorder.events) == 1
        assert "failed on SyncStartEvent" in caplog.text

    def test_strict_propagates(self):
        class Broken(EventProcessor):
            def on_event(self, event):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            EventDispatcher([Broken()], strict=True).emit(SyncStartEvent(session_id="s"))

    def test_shutdown_reaches_all_processors(self):
        class Broken(EventRecorder):
            def shutdown(self):
                raise RuntimeError("boom")

        recorder = EventRecorder()
        EventDispatcher([Broken(), recorder]).shutdown()
        assert recorder.shut_down

    def test_strict_shutdown_raises_after_all(self):
        class Broken(EventRecorder):
            def shutdown(self):
                raise RuntimeError("boom")

        recorder = EventRecorder()
        with pytest.raises(RuntimeError, match="boom"):
            EventDispatcher([Broken(), recorder], strict=True).shutdown()
        assert recorder.shut_down
