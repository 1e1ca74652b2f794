"""Tests for the in-memory render sink."""

from __future__ import annotations

import logging

import pytest

from meshsync.graph.canonical import ArrowDirection
from meshsync.sink.memory import InMemoryRenderSink, InMemoryStore
from meshsync.sink.records import RenderEdge, RenderNode


class TestInMemoryStore:
    def test_add_get_has(self):
        store = InMemoryStore("nodes")
        store.add("a", 1)
        assert store.get("a") == 1
        assert store.has("a")
        assert "a" in store
        assert store.get("missing") is None

    def test_duplicate_add_raises(self):
        store = InMemoryStore("nodes")
        store.add("a", 1)
        with pytest.raises(KeyError, match="duplicate"):
            store.add("a", 2)

    def test_update_unknown_raises(self):
        with pytest.raises(KeyError, match="unknown"):
            InMemoryStore("nodes").update("a", 1)

    def test_remove_unknown_raises(self):
        with pytest.raises(KeyError, match="unknown"):
            InMemoryStore("nodes").remove("a")

    def test_mutations_counted(self):
        store = InMemoryStore()
        store.add("a", 1)
        store.update("a", 2)
        store.remove("a")
        assert store.mutations == 3
        assert len(store) == 0

    def test_ids_is_a_copy(self):
        store = InMemoryStore()
        store.add("a", 1)
        ids = store.ids()
        store.remove("a")
        assert ids == {"a"}

    def test_values_keep_insertion_order(self):
        store = InMemoryStore()
        for key in "cab":
            store.add(key, key.upper())
        assert store.values() == ["C", "A", "B"]


class TestListeners:
    def test_listener_sees_every_mutation(self):
        store = InMemoryStore()
        seen = []
        store.subscribe(lambda *args: seen.append(args))
        store.add("a", 1)
        store.update("a", 2)
        store.remove("a")
        assert seen == [("add", "a", 1), ("update", "a", 2), ("remove", "a", None)]

    def test_unsubscribe(self):
        store = InMemoryStore()
        seen = []
        unsubscribe = store.subscribe(lambda *args: seen.append(args))
        unsubscribe()
        store.add("a", 1)
        assert seen == []

    def test_failing_listener_is_logged(self, caplog):
        store = InMemoryStore("nodes")

        def boom(*args):
            raise ValueError("redraw failed")

        store.subscribe(boom)
        with caplog.at_level(logging.WARNING, logger="meshsync.sink.memory"):
            store.add("a", 1)
        assert store.has("a")
        assert "failed on add nodes" in caplog.text


class TestInMemoryRenderSink:
    @pytest.fixture
    def sink(self):
        sink = InMemoryRenderSink()
        sink.nodes.add("a", RenderNode(id="a", label="a", emphasis=True, color={"border": "#2BE97C"}))
        sink.nodes.add("b", RenderNode(id="b", label="b"))
        sink.edges.add(
            ("a", "b"),
            RenderEdge(id=("a", "b"), from_id="a", to_id="b", label="1", width=3, arrows=ArrowDirection.TO),
        )
        return sink

    def test_ids_and_mutations(self, sink):
        assert sink.node_ids() == {"a", "b"}
        assert sink.edge_ids() == {("a", "b")}
        assert sink.mutations == 3

    def test_repr(self, sink):
        assert repr(sink) == "InMemoryRenderSink(nodes=2, edges=1)"

    def test_to_vis(self, sink):
        vis = sink.to_vis()
        assert [n["id"] for n in vis["nodes"]] == ["a", "b"]
        assert vis["nodes"][0]["color"] == {"border": "#2BE97C"}
        assert vis["edges"][0]["id"] == "a-b"
        assert vis["edges"][0]["arrows"] == "to"

    def test_to_networkx(self, sink):
        graph = sink.to_networkx()
        assert set(graph.nodes) == {"a", "b"}
        assert graph.nodes["a"]["emphasis"] is True
        assert graph.edges["a", "b"]["width"] == 3
        assert graph.edges["b", "a"]["label"] == "1"
