"""Conversion between the canvas graph and the stored workflow definition.

``to_wire`` drops UI-only state (selection, computed style). ``from_wire``
re-themes every node from its type, treating any stored style as overrides,
so legacy rows and AI output are rendered consistently.
"""

import copy
import json
from typing import Any

from pydantic import ValidationError

from flowcanvas.models.styles import compute_style
from flowcanvas.models.workflow import (
    WireEdge,
    WireNode,
    WorkflowCreate,
    WorkflowDefinition,
    WorkflowUpdate,
)
from flowcanvas.models.workflow_graph import (
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    XYPosition,
)


class InvalidDefinitionError(ValueError):
    """Raised when a JSON document is not a ``{nodes: [], edges: []}`` definition."""
    pass


def to_wire(graph: WorkflowGraph) -> WorkflowDefinition:
    """Serialize the live graph into the backend's definition shape."""
    nodes = [
        WireNode(
            id=node.id,
            type=node.type,
            position=node.position.model_copy(),
            data=copy.deepcopy(node.data),
            width=node.width,
            height=node.height,
            source_position=node.source_position,
            target_position=node.target_position,
        )
        for node in graph.nodes
    ]
    edges = [
        WireEdge(
            id=edge.id,
            source=edge.source,
            target=edge.target,
            animated=edge.animated,
            marker_end=copy.deepcopy(edge.marker_end),
            style=copy.deepcopy(edge.style),
        )
        for edge in graph.edges
    ]
    return WorkflowDefinition(nodes=nodes, edges=edges)


def from_wire(definition: WorkflowDefinition | dict[str, Any]) -> WorkflowGraph:
    """Rebuild a canvas graph from a stored definition, re-theming nodes."""
    if isinstance(definition, dict):
        definition = WorkflowDefinition.model_validate(definition)

    nodes = [
        WorkflowNode(
            id=wire.id,
            type=wire.type,
            position=wire.position.model_copy() if wire.position else XYPosition(),
            data=copy.deepcopy(wire.data) if wire.data is not None else {},
            style=compute_style(wire.type, wire.style),
            width=wire.width,
            height=wire.height,
            source_position=wire.source_position,
            target_position=wire.target_position,
        )
        for wire in definition.nodes
    ]
    edges = [
        WorkflowEdge(
            id=wire.id,
            source=wire.source,
            target=wire.target,
            animated=bool(wire.animated),
            marker_end=copy.deepcopy(wire.marker_end),
            style=copy.deepcopy(wire.style),
        )
        for wire in definition.edges
    ]
    return WorkflowGraph(nodes=nodes, edges=edges)


def parse_definition(raw: str | dict[str, Any]) -> WorkflowDefinition:
    """Parse and validate a definition coming from outside (AI, session slot).

    Raises:
        InvalidDefinitionError: when the JSON does not parse, is not an
            object, lacks ``nodes``/``edges`` lists, or has malformed entries.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidDefinitionError(f"workflow JSON could not be parsed: {e}") from e

    if not isinstance(raw, dict):
        raise InvalidDefinitionError("workflow JSON must be an object with 'nodes' and 'edges'")
    for key in ("nodes", "edges"):
        if not isinstance(raw.get(key), list):
            raise InvalidDefinitionError(f"workflow JSON is missing a '{key}' array")

    try:
        return WorkflowDefinition.model_validate(raw)
    except ValidationError as e:
        raise InvalidDefinitionError(
            f"workflow JSON has malformed nodes or edges: {e.error_count()} error(s)"
        ) from e


def build_create_payload(name: str, graph: WorkflowGraph) -> WorkflowCreate:
    return WorkflowCreate(name=name, definition=to_wire(graph))


def build_update_payload(graph: WorkflowGraph, name: str | None = None) -> WorkflowUpdate:
    return WorkflowUpdate(name=name, definition=to_wire(graph))
