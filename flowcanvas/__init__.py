"""FiCX workflow canvas core: graph model, editing session, undo history and adapters."""

from flowcanvas.models.node_data import NodeType
from flowcanvas.models.workflow_graph import (
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    XYPosition,
)
from flowcanvas.models.workflow import Workflow, WorkflowDefinition
from flowcanvas.adapters.assistant import WorkflowAssistant
from flowcanvas.adapters.wire import from_wire, to_wire
from flowcanvas.editor.history import HistoryStack
from flowcanvas.editor.workflow_editor import WorkflowEditor
from flowcanvas.sdk.workflow_client import WorkflowClient

__all__ = [
    # Graph model
    "NodeType",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "XYPosition",
    # Stored workflows
    "Workflow",
    "WorkflowDefinition",
    # Editing
    "HistoryStack",
    "WorkflowEditor",
    # Adapters
    "WorkflowAssistant",
    "from_wire",
    "to_wire",
    # High-level APIs
    "WorkflowClient",
]
