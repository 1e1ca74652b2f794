"""Tests for CLI formatting utilities."""

import json

from meshsync.cli._format import (
    edge_rows,
    json_envelope,
    node_rows,
    print_json,
    print_lines,
    print_table,
    truncate,
)
from meshsync.graph.canonical import ArrowDirection
from meshsync.sink.records import RenderEdge, RenderNode


class TestTruncate:
    def test_short_value(self):
        assert truncate("10.0.0.1") == "10.0.0.1"

    def test_long_value(self):
        result = truncate("x" * 300, max_chars=50)
        assert len(result) == 50
        assert result.endswith("…")


class TestRows:
    def test_node_rows_sorted_with_role(self):
        nodes = [RenderNode(id="b", label="b"), RenderNode(id="a", label="a", emphasis=True)]
        assert node_rows(nodes, {"a": 1}) == [["a", "a", "root", "1"], ["b", "b", "", "0"]]

    def test_edge_rows(self):
        edges = [
            RenderEdge(id=("b", "c"), from_id="b", to_id="c", label="1"),
            RenderEdge(id=("a", "b"), from_id="a", to_id="b", label="2/-", width=3, arrows=ArrowDirection.FROM),
        ]
        assert edge_rows(edges) == [["a", "b", "2/-", "3", "from"], ["b", "c", "1", "1", "—"]]


class TestJsonEnvelope:
    def test_structure(self):
        env = json_envelope("show", {"key": "value"})
        assert env["schema_version"] == 1
        assert env["command"] == "show"
        assert "generated_at" in env
        assert env["data"] == {"key": "value"}

    def test_print_json_to_file(self, tmp_path, capsys):
        target = tmp_path / "out.json"
        print_json("show", {"nodes": []}, str(target))
        assert json.loads(target.read_text())["data"] == {"nodes": []}
        assert "Wrote show output to" in capsys.readouterr().out


class TestPrintTable:
    def test_basic_table(self):
        headers = ["Node", "Degree"]
        rows = [["10.0.0.1", "12"], ["10.0.0.2", "3"]]
        lines = print_table(headers, rows)
        assert len(lines) == 4  # header + separator + 2 rows
        assert "Node" in lines[0]
        assert "───" in lines[1]
        assert lines[3].endswith("     3")

    def test_empty_rows(self):
        assert print_table(["A", "B"], []) == []


class TestPrintLines:
    def test_truncation_notice(self, capsys):
        print_lines([str(i) for i in range(5)], max_lines=2)
        output = capsys.readouterr().out
        assert "# ... 3 more lines" in output
        assert "4" not in output.splitlines()
