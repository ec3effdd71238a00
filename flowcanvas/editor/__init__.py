"""The editing session and its undo history."""

from flowcanvas.editor.history import HistoryStack, HistoryState
from flowcanvas.editor.workflow_editor import (
    EdgeNotFoundError,
    EditorBusyError,
    EditorError,
    EditorPanel,
    NodeNotFoundError,
    WorkflowEditor,
    WorkflowNameRequiredError,
    default_graph,
)

__all__ = [
    "HistoryStack",
    "HistoryState",
    "WorkflowEditor",
    "EditorPanel",
    "default_graph",
    # errors
    "EditorError",
    "NodeNotFoundError",
    "EdgeNotFoundError",
    "EditorBusyError",
    "WorkflowNameRequiredError",
]
