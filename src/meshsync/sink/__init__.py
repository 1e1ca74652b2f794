"""Render sink interface, records and the in-memory implementation."""

from meshsync.sink.base import RecordStore, RenderSink
from meshsync.sink.memory import InMemoryRenderSink, InMemoryStore
from meshsync.sink.records import RenderEdge, RenderNode

__all__ = [
    "InMemoryRenderSink",
    "InMemoryStore",
    "RecordStore",
    "RenderEdge",
    "RenderNode",
    "RenderSink",
]
