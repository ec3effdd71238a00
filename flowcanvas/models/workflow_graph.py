"""In-memory model of a workflow graph being edited on the canvas.

Field names are snake_case in Python and camelCase on the wire
(``sourcePosition``, ``markerEnd``), matching what the backend stores.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowcanvas.models.node_data import NodeType, normalize_type


class HandlePosition(str, Enum):
    """Side of a node that a connection handle sits on."""

    left = "left"
    right = "right"
    top = "top"
    bottom = "bottom"


class XYPosition(BaseModel):
    """canvas coordinate of a node's top-left corner."""

    x: float = 0.0
    y: float = 0.0


class MarkerEnd(BaseModel):
    """arrow marker drawn at the target end of an edge."""

    model_config = ConfigDict(extra="allow")

    type: str = "arrowclosed"
    color: str | None = None


class WorkflowNode(BaseModel):
    """a single step placed on the canvas."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str = NodeType.generic_task.value
    position: XYPosition = Field(default_factory=XYPosition)
    data: dict[str, Any] = Field(default_factory=dict)
    style: dict[str, Any] = Field(default_factory=dict)
    width: float | None = None
    height: float | None = None
    source_position: HandlePosition | None = Field(default=None, alias="sourcePosition")
    target_position: HandlePosition | None = Field(default=None, alias="targetPosition")

    # UI-only marker, never serialized
    selected: bool = Field(default=False, exclude=True)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> str:
        if value is None:
            return NodeType.generic_task.value
        return normalize_type(value)

    @field_validator("style", "data", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def label(self) -> str:
        return str(self.data.get("label", ""))


class WorkflowEdge(BaseModel):
    """a directed connection between two nodes."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    target: str
    animated: bool = False
    marker_end: MarkerEnd | str | None = Field(default=None, alias="markerEnd")
    style: dict[str, Any] | None = None

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


class WorkflowGraph(BaseModel):
    """The complete ``{nodes, edges}`` structure of one workflow."""

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> WorkflowNode | None:
        """Find a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> WorkflowEdge | None:
        """Find an edge by ID."""
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def edges_touching(self, node_id: str) -> list[WorkflowEdge]:
        """All edges with ``node_id`` as source or target."""
        return [edge for edge in self.edges if edge.touches(node_id)]

    def snapshot_key(self) -> str:
        """Canonical JSON of the parts of the graph that history tracks.

        Node ids, types, positions and data plus the full edge list. Node
        style and measured sizes are left out so that presentation-only
        changes never count as an edit. Keys are sorted so equal graphs
        always produce equal strings.
        """
        payload = {
            "nodes": [
                node.model_dump(mode="json", include={"id", "type", "position", "data"})
                for node in self.nodes
            ],
            "edges": [
                edge.model_dump(mode="json", by_alias=True) for edge in self.edges
            ],
        }
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))
