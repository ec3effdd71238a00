"""Tests for structural graph checks."""

from flowcanvas.analysis.graph_check import check_graph
from flowcanvas.editor.workflow_editor import default_graph
from flowcanvas.models.workflow_graph import WorkflowEdge, WorkflowGraph, WorkflowNode


class TestCheckGraph:
    def test_default_graph_is_clean(self):
        report = check_graph(default_graph())
        assert report.ok
        assert report.has_trigger
        assert report.has_end

    def test_dangling_and_disconnected(self):
        graph = default_graph()
        graph.nodes.append(WorkflowNode(id="lonely", type="delay"))
        graph.edges.append(WorkflowEdge(id="bad", source="1", target="ghost"))
        report = check_graph(graph)
        assert report.dangling_edges == ["bad"]
        assert report.disconnected_nodes == ["lonely"]
        assert not report.ok

    def test_self_loops_and_duplicates_are_not_issues(self):
        graph = default_graph()
        graph.edges.append(WorkflowEdge(id="loop", source="2", target="2"))
        graph.edges.append(WorkflowEdge(id="again", source="1", target="2"))
        report = check_graph(graph)
        assert report.self_loops == ["loop"]
        assert report.duplicate_edges == [("1", "2")]
        assert report.ok

    def test_unknown_type_and_missing_end(self):
        graph = WorkflowGraph(
            nodes=[
                WorkflowNode(id="a", type="input"),
                WorkflowNode(id="b", type="sendSlackMessage"),
            ],
            edges=[WorkflowEdge(id="e", source="a", target="b")],
        )
        report = check_graph(graph)
        assert report.unknown_types == ["sendSlackMessage"]
        assert "Workflow has no End node" in report.issues

    def test_check_does_not_modify(self):
        graph = default_graph()
        graph.edges.append(WorkflowEdge(id="bad", source="1", target="ghost"))
        before = graph.model_copy(deep=True)
        check_graph(graph)
        assert graph == before
