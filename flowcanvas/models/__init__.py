"""Core data models for the workflow canvas."""

from flowcanvas.models.assistant import AssistantReply, ChatMessage, ChatRole
from flowcanvas.models.node_data import (
    NodeData,
    NodeType,
    normalize_type,
    parse_node_data,
)
from flowcanvas.models.node_registry import (
    NODE_DEFINITIONS,
    NodeDefinition,
    get_definition,
    icon_for,
    initial_data_for,
    list_types,
)
from flowcanvas.models.notice import Notice, NoticeVariant
from flowcanvas.models.workflow import (
    WireEdge,
    WireNode,
    Workflow,
    WorkflowCreate,
    WorkflowDefinition,
    WorkflowStatus,
    WorkflowUpdate,
)
from flowcanvas.models.workflow_graph import (
    HandlePosition,
    MarkerEnd,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    XYPosition,
)

__all__ = [
    # graph
    "HandlePosition",
    "MarkerEnd",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "XYPosition",
    # node types and payloads
    "NodeData",
    "NodeType",
    "normalize_type",
    "parse_node_data",
    # registry
    "NODE_DEFINITIONS",
    "NodeDefinition",
    "get_definition",
    "icon_for",
    "initial_data_for",
    "list_types",
    # persistence wire shapes
    "WireEdge",
    "WireNode",
    "Workflow",
    "WorkflowCreate",
    "WorkflowDefinition",
    "WorkflowStatus",
    "WorkflowUpdate",
    # assistant
    "AssistantReply",
    "ChatMessage",
    "ChatRole",
    # notices
    "Notice",
    "NoticeVariant",
]
