"""Structural checks over a workflow graph.

The checks are advisory: they describe problems (dangling edges, missing
trigger, ...) but never change the graph or block a save. Self loops and
parallel edges are reported separately because the editor accepts them.
"""

from collections import Counter
from dataclasses import dataclass, field

from flowcanvas.models.node_data import NodeType
from flowcanvas.models.workflow_graph import WorkflowGraph

_KNOWN_TYPES = {t.value for t in NodeType}
_TRIGGER_TYPES = {NodeType.start_trigger.value, NodeType.form_trigger.value}


@dataclass
class GraphReport:
    """Findings from ``check_graph``."""

    node_count: int
    edge_count: int
    dangling_edges: list[str] = field(default_factory=list)
    self_loops: list[str] = field(default_factory=list)
    duplicate_edges: list[tuple[str, str]] = field(default_factory=list)
    duplicate_node_ids: list[str] = field(default_factory=list)
    unknown_types: list[str] = field(default_factory=list)
    disconnected_nodes: list[str] = field(default_factory=list)
    has_trigger: bool = False
    has_end: bool = False

    @property
    def issues(self) -> list[str]:
        """Human-readable problems; self loops and parallel edges excluded."""
        problems: list[str] = []
        for edge_id in self.dangling_edges:
            problems.append(f"Edge {edge_id} references a node that does not exist")
        for node_id in self.duplicate_node_ids:
            problems.append(f"Node id {node_id} is used more than once")
        for node_type in self.unknown_types:
            problems.append(f"Unknown node type: {node_type}")
        for node_id in self.disconnected_nodes:
            problems.append(f"Node {node_id} is disconnected (no edges)")
        if self.node_count and not self.has_trigger:
            problems.append("Workflow has no trigger node")
        if self.node_count and not self.has_end:
            problems.append("Workflow has no End node")
        return problems

    @property
    def ok(self) -> bool:
        return not self.issues


def check_graph(graph: WorkflowGraph) -> GraphReport:
    """Inspect ``graph`` and report structural problems.

    Args:
        graph: the graph to inspect (not modified).

    Returns:
        GraphReport with one list per kind of finding.
    """
    report = GraphReport(node_count=len(graph.nodes), edge_count=len(graph.edges))

    id_counts = Counter(node.id for node in graph.nodes)
    report.duplicate_node_ids = sorted(i for i, n in id_counts.items() if n > 1)
    node_ids = set(id_counts)

    pair_counts: Counter[tuple[str, str]] = Counter()
    connected: set[str] = set()
    for edge in graph.edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            report.dangling_edges.append(edge.id)
        if edge.source == edge.target:
            report.self_loops.append(edge.id)
        pair_counts[(edge.source, edge.target)] += 1
        connected.update((edge.source, edge.target))
    report.duplicate_edges = sorted(p for p, n in pair_counts.items() if n > 1)

    unknown: set[str] = set()
    for node in graph.nodes:
        if node.type not in _KNOWN_TYPES:
            unknown.add(node.type)
        if node.type in _TRIGGER_TYPES:
            report.has_trigger = True
        elif node.type == NodeType.end.value:
            report.has_end = True
        if node.id not in connected and len(graph.nodes) > 1:
            report.disconnected_nodes.append(node.id)
    report.unknown_types = sorted(unknown)

    return report
