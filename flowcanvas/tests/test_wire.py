"""Tests for the canvas <-> stored definition conversion."""

import json

import pytest

from flowcanvas.adapters.wire import (
    InvalidDefinitionError,
    build_create_payload,
    build_update_payload,
    from_wire,
    parse_definition,
    to_wire,
)
from flowcanvas.editor.workflow_editor import WorkflowEditor, default_graph
from flowcanvas.models.styles import compute_style
from flowcanvas.models.workflow_graph import WorkflowGraph


def _identity(graph: WorkflowGraph) -> tuple:
    nodes = [(n.id, n.type, n.position, n.data) for n in graph.nodes]
    edges = [(e.id, e.source, e.target) for e in graph.edges]
    return nodes, edges


class TestRoundTrip:
    """Test that to_wire/from_wire preserve graph identity."""

    def test_default_graph_round_trip(self):
        graph = default_graph()
        assert _identity(from_wire(to_wire(graph))) == _identity(graph)

    def test_edited_graph_round_trip(self):
        editor = WorkflowEditor()
        node = editor.add_node("condition", (120, 80))
        editor.connect("1", node.id)
        editor.update_node_data(node.id, {"logic": {"variable": "x", "operator": "equals", "value": 3}})
        graph = editor.graph
        restored = from_wire(to_wire(graph))
        assert _identity(restored) == _identity(graph)
        assert restored.get_node(node.id).source_position == graph.get_node(node.id).source_position

    def test_round_trip_through_json(self):
        graph = default_graph()
        payload = json.loads(to_wire(graph).to_json())
        assert _identity(from_wire(payload)) == _identity(graph)

    def test_to_wire_drops_style_and_copies_data(self):
        graph = default_graph()
        definition = to_wire(graph)
        assert definition.nodes[0].style is None
        definition.nodes[0].data["label"] = "changed"
        assert graph.nodes[0].data["label"] == "Start Trigger"

    def test_from_wire_rethemes(self):
        """Stored style is treated as overrides on the canonical style."""
        graph = from_wire({
            "nodes": [
                {"id": "1", "type": "output", "style": {"width": 300}},
                {"id": "2"},
            ],
            "edges": [],
        })
        assert graph.nodes[0].style == compute_style("output", {"width": 300})
        assert graph.nodes[1].type == "default"
        assert graph.nodes[1].position.x == 0
        assert graph.nodes[1].style == compute_style("default")


class TestParseDefinition:
    """Test validation of externally supplied definitions."""

    @pytest.mark.parametrize("raw", [
        "not json",
        "[1, 2]",
        '{"nodes": "not-an-array", "edges": []}',
        '{"nodes": []}',
        '{"nodes": [{"label": "no id"}], "edges": []}',
    ])
    def test_rejects_malformed(self, raw):
        with pytest.raises(InvalidDefinitionError):
            parse_definition(raw)

    def test_accepts_dict(self):
        definition = parse_definition({"nodes": [{"id": "a"}], "edges": []})
        assert definition.nodes[0].id == "a"

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_definition("{")


class TestPayloads:
    def test_create_payload(self):
        payload = build_create_payload("Flow", default_graph())
        assert payload.name == "Flow"
        assert len(payload.definition.nodes) == 3

    def test_update_payload_omits_unset_name(self):
        payload = build_update_payload(default_graph())
        dumped = payload.model_dump(exclude_none=True)
        assert "name" not in dumped
        assert "definition" in dumped
