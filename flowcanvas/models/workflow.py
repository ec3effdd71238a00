"""Wire shapes exchanged with the workflow persistence API.

A ``WorkflowDefinition`` is the stored form of a graph: the same node/edge
structure as the canvas, minus UI-only state.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from flowcanvas.models.workflow_graph import HandlePosition, MarkerEnd, XYPosition


class WireNode(BaseModel):
    """node as stored by the backend.

    ``style`` is accepted on input (legacy rows, AI output) but the canvas
    never writes it back; it is recomputed from the type on load.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str | None = None
    position: XYPosition | None = None
    data: dict[str, Any] | None = None
    width: float | None = None
    height: float | None = None
    source_position: HandlePosition | None = Field(default=None, alias="sourcePosition")
    target_position: HandlePosition | None = Field(default=None, alias="targetPosition")
    style: dict[str, Any] | None = None


class WireEdge(BaseModel):
    """edge as stored by the backend."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    target: str
    animated: bool | None = None
    marker_end: MarkerEnd | str | None = Field(default=None, alias="markerEnd")
    style: dict[str, Any] | None = None


class WorkflowDefinition(BaseModel):
    """``{nodes, edges}`` exactly as the persistence and AI services expect."""

    nodes: list[WireNode] = Field(default_factory=list)
    edges: list[WireEdge] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and unset fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class WorkflowStatus(str, Enum):
    """Lifecycle status of a stored workflow."""

    active = "Active"
    paused = "Paused"
    draft = "Draft"


class Workflow(BaseModel):
    """A stored workflow as returned by the API."""

    id: str
    name: str
    status: WorkflowStatus = WorkflowStatus.draft
    is_template: bool = False
    definition: WorkflowDefinition = Field(default_factory=WorkflowDefinition)
    created_at: str
    updated_at: str


class WorkflowCreate(BaseModel):
    """Request body for ``POST /workflows``."""

    name: str
    definition: WorkflowDefinition
    status: WorkflowStatus | None = None
    is_template: bool | None = None


class WorkflowUpdate(BaseModel):
    """Request body for ``PUT /workflows/{id}``; every field optional."""

    name: str | None = None
    definition: WorkflowDefinition | None = None
    status: WorkflowStatus | None = None
    is_template: bool | None = None
