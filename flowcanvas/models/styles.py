"""Role-based node styling and default edge presentation.

A node's style is derived from its type: triggers get the primary theme, the
end event gets the destructive theme and everything else the neutral card
theme. ``compute_style`` is applied when a node is created or a graph is
loaded from outside (storage, AI, handoff), never on every edit, so per-node
overrides survive.
"""

from enum import Enum
from typing import Any

from flowcanvas.models.node_data import NodeType, normalize_type
from flowcanvas.models.workflow_graph import MarkerEnd, WorkflowGraph, WorkflowNode

PRIMARY_COLOR = "hsl(var(--primary))"

BASE_NODE_STYLE: dict[str, Any] = {
    "border": "1px solid hsl(var(--border))",
    "borderRadius": "var(--radius)",
    "boxShadow": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
    "width": 200,
    "padding": 0,
}


class NodeRole(str, Enum):
    primary = "primary"
    destructive = "destructive"
    card = "card"


_ROLE_STYLES: dict[NodeRole, dict[str, Any]] = {
    NodeRole.primary: {
        "background": "hsl(var(--primary))",
        "color": "hsl(var(--primary-foreground))",
        "border": "1px solid hsl(var(--primary))",
    },
    NodeRole.destructive: {
        "background": "hsl(var(--destructive))",
        "color": "hsl(var(--destructive-foreground))",
        "border": "1px solid hsl(var(--destructive))",
    },
    NodeRole.card: {
        "background": "hsl(var(--card))",
        "color": "hsl(var(--card-foreground))",
    },
}

_TRIGGER_TYPES = {NodeType.start_trigger.value, NodeType.form_trigger.value}
_TERMINAL_TYPES = {NodeType.end.value}


def role_for(node_type: NodeType | str | None) -> NodeRole:
    """Theme role for a node type; unknown or missing types are neutral."""
    tag = normalize_type(node_type) if node_type is not None else None
    if tag in _TRIGGER_TYPES:
        return NodeRole.primary
    if tag in _TERMINAL_TYPES:
        return NodeRole.destructive
    return NodeRole.card


def compute_style(
    node_type: NodeType | str | None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Canonical style for ``node_type`` with ``overrides`` laid on top."""
    style = {**BASE_NODE_STYLE, **_ROLE_STYLES[role_for(node_type)]}
    if overrides:
        style.update(overrides)
    return style


def restyle_node(node: WorkflowNode) -> WorkflowNode:
    """Copy of ``node`` re-themed for its type, keeping its style as overrides."""
    return node.model_copy(
        deep=True, update={"style": compute_style(node.type, node.style)}
    )


def restyle_graph(graph: WorkflowGraph) -> WorkflowGraph:
    """Copy of ``graph`` with every node re-themed. Edges are untouched."""
    return WorkflowGraph(
        nodes=[restyle_node(node) for node in graph.nodes],
        edges=[edge.model_copy(deep=True) for edge in graph.edges],
    )


def default_edge_style() -> dict[str, Any]:
    return {"stroke": PRIMARY_COLOR, "strokeWidth": 2}


def default_marker_end() -> MarkerEnd:
    return MarkerEnd(type="arrowclosed", color=PRIMARY_COLOR)
