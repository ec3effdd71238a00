"""Editing session for one workflow graph.

``WorkflowEditor`` owns the live graph, its undo history, the node id counter,
the current selection and which side panel is open. Every mutating operation
applies its change and then runs one snapshot cycle against the history, so
each committed edit yields exactly one history entry.
"""

from __future__ import annotations

from enum import Enum
from logging import getLogger
from typing import Any, Protocol

from flowcanvas.adapters.sinks import LogSink, NoticeSink
from flowcanvas.adapters.wire import build_create_payload, build_update_payload, from_wire
from flowcanvas.analysis.graph_check import check_graph
from flowcanvas.editor.history import HistoryStack
from flowcanvas.models.styles import (
    compute_style,
    default_edge_style,
    default_marker_end,
    restyle_graph,
)
from flowcanvas.models.node_data import NodeType, normalize_type
from flowcanvas.models.node_registry import initial_data_for
from flowcanvas.models.notice import Notice, NoticeVariant
from flowcanvas.models.workflow import (
    Workflow,
    WorkflowCreate,
    WorkflowDefinition,
    WorkflowUpdate,
)
from flowcanvas.models.workflow_graph import (
    HandlePosition,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    XYPosition,
)
from flowcanvas.sdk.workflow_client import ApiError, SessionExpiredError
from flowcanvas.utils.identifiers import NodeIdCounter, generate_edge_id

logger = getLogger(__name__)


class EditorError(Exception):
    """Base class for editing session errors."""
    pass


class NodeNotFoundError(EditorError):
    pass


class EdgeNotFoundError(EditorError):
    pass


class EditorBusyError(EditorError):
    """Raised when a save is requested while another one is in flight."""
    pass


class WorkflowNameRequiredError(EditorError):
    """Raised when saving a new workflow without a name."""
    pass


class EditorPanel(str, Enum):
    """Side panel currently open next to the canvas."""

    none = "none"
    config = "config"
    assistant = "assistant"


class WorkflowStore(Protocol):
    """What ``save`` needs from the persistence client."""

    def create(self, payload: WorkflowCreate) -> Workflow: ...

    def update(self, workflow_id: str, payload: WorkflowUpdate) -> Workflow: ...


def default_graph() -> WorkflowGraph:
    """The starter graph: Start Trigger → Action Task → End Event."""
    return WorkflowGraph(
        nodes=[
            WorkflowNode(
                id="1",
                type=NodeType.start_trigger,
                data={"label": "Start Trigger"},
                position=XYPosition(x=50, y=150),
                source_position=HandlePosition.right,
                style=compute_style(NodeType.start_trigger),
            ),
            WorkflowNode(
                id="2",
                type=NodeType.generic_task,
                data={"label": "Action Task"},
                position=XYPosition(x=350, y=150),
                target_position=HandlePosition.left,
                source_position=HandlePosition.right,
                style=compute_style(NodeType.generic_task),
            ),
            WorkflowNode(
                id="3",
                type=NodeType.end,
                data={"label": "End Event"},
                position=XYPosition(x=650, y=150),
                target_position=HandlePosition.left,
                style=compute_style(NodeType.end),
            ),
        ],
        edges=[
            WorkflowEdge(
                id="e1-2", source="1", target="2", animated=True,
                marker_end=default_marker_end(), style=default_edge_style(),
            ),
            WorkflowEdge(
                id="e2-3", source="2", target="3", animated=True,
                marker_end=default_marker_end(), style=default_edge_style(),
            ),
        ],
    )


def _as_position(position: XYPosition | dict[str, float] | tuple[float, float]) -> XYPosition:
    if isinstance(position, XYPosition):
        return position.model_copy()
    if isinstance(position, dict):
        return XYPosition.model_validate(position)
    x, y = position
    return XYPosition(x=x, y=y)


class WorkflowEditor:
    """A single editing session over one workflow graph.

    Usage:
        editor = WorkflowEditor()
        node = editor.add_node("send-email", {"x": 100, "y": 100})
        editor.connect(node.id, "3")
        editor.undo()
    """

    def __init__(
        self,
        initial_graph: WorkflowGraph | None = None,
        workflow_id: str | None = None,
        workflow_name: str = "",
        notice_sink: NoticeSink | None = None,
    ) -> None:
        """
        Args:
            initial_graph: graph to start from (default: the starter graph).
                Nodes are re-themed for their types; stored styles act as
                overrides.
            workflow_id: server id when editing a stored workflow.
            workflow_name: name of the stored workflow, if any.
            notice_sink: where user-facing notices go (default: logging).
        """
        base = initial_graph if initial_graph is not None else default_graph()
        self.initial_graph = restyle_graph(base)
        self.graph = self.initial_graph.model_copy(deep=True)
        self.history = HistoryStack(self.graph)
        self.id_counter = NodeIdCounter()
        self.id_counter.rebase(self.graph.node_ids())

        self.selected_node_id: str | None = None
        self.panel = EditorPanel.none

        self.workflow_id = workflow_id
        self.workflow_name = workflow_name
        self.notices: NoticeSink = notice_sink or LogSink()
        self._saving = False

    @classmethod
    def from_workflow(
        cls,
        workflow: Workflow,
        notice_sink: NoticeSink | None = None,
    ) -> WorkflowEditor:
        """Open a session bound to a stored workflow."""
        return cls(
            from_wire(workflow.definition),
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            notice_sink=notice_sink,
        )

    @classmethod
    def from_definition(
        cls,
        definition: WorkflowDefinition | dict[str, Any],
        notice_sink: NoticeSink | None = None,
    ) -> WorkflowEditor:
        """Open an unsaved session from a bare definition."""
        return cls(from_wire(definition), notice_sink=notice_sink)

    def __repr__(self) -> str:
        return (
            f"WorkflowEditor(workflow_id={self.workflow_id!r}, "
            f"nodes={len(self.graph.nodes)}, edges={len(self.graph.edges)}, "
            f"history={self.history.index + 1}/{len(self.history)})"
        )

    # ── internals ──

    def _notify(
        self,
        title: str,
        description: str = "",
        variant: NoticeVariant = NoticeVariant.default,
    ) -> None:
        self.notices.append(Notice(title=title, description=description, variant=variant))

    def _snapshot(self) -> bool:
        """One snapshot cycle: offer the live graph to the history."""
        return self.history.commit(self.graph)

    def _require_node(self, node_id: str) -> WorkflowNode:
        node = self.graph.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(f"Node not found: {node_id}")
        return node

    def _sync_selection(self) -> None:
        if self.selected_node_id is not None and self.graph.get_node(self.selected_node_id) is None:
            self.selected_node_id = None
            if self.panel is EditorPanel.config:
                self.panel = EditorPanel.none
        for node in self.graph.nodes:
            node.selected = node.id == self.selected_node_id

    # ── selection and panels ──

    @property
    def selected_node(self) -> WorkflowNode | None:
        """The node open in the config panel, looked up by id."""
        if self.selected_node_id is None:
            return None
        return self.graph.get_node(self.selected_node_id)

    def select_node(self, node_id: str) -> WorkflowNode:
        """Open ``node_id`` in the config panel (closes the assistant)."""
        node = self._require_node(node_id)
        self.selected_node_id = node_id
        self.panel = EditorPanel.config
        self._sync_selection()
        return node

    def clear_selection(self) -> None:
        """Canvas background click: drop the selection and its panel."""
        self.selected_node_id = None
        if self.panel is EditorPanel.config:
            self.panel = EditorPanel.none
        self._sync_selection()

    def toggle_assistant(self) -> bool:
        """Show or hide the AI assistant. Returns True when now visible."""
        self.selected_node_id = None
        self.panel = (
            EditorPanel.none if self.panel is EditorPanel.assistant else EditorPanel.assistant
        )
        self._sync_selection()
        return self.panel is EditorPanel.assistant

    # ── graph mutations ──

    def add_node(
        self,
        node_type: NodeType | str,
        position: XYPosition | dict[str, float] | tuple[float, float],
    ) -> WorkflowNode:
        """Drop a new node of ``node_type`` at ``position``."""
        tag = normalize_type(node_type)
        node = WorkflowNode(
            id=self.id_counter.next_id(),
            type=tag,
            position=_as_position(position),
            data=initial_data_for(tag, tag),
            source_position=HandlePosition.right,
            target_position=HandlePosition.left,
            style=compute_style(tag),
        )
        self.graph.nodes.append(node)
        self._snapshot()
        logger.debug(f"added node {node.id} ({tag})")
        return node

    def connect(self, source_id: str, target_id: str) -> WorkflowEdge:
        """Draw an edge from ``source_id`` to ``target_id``.

        Self loops and parallel edges are allowed.
        """
        self._require_node(source_id)
        self._require_node(target_id)
        edge = WorkflowEdge(
            id=generate_edge_id(source_id, target_id),
            source=source_id,
            target=target_id,
            animated=True,
            marker_end=default_marker_end(),
            style=default_edge_style(),
        )
        self.graph.edges.append(edge)
        self._snapshot()
        return edge

    def update_node_data(self, node_id: str, partial: dict[str, Any]) -> WorkflowNode:
        """Shallow-merge ``partial`` into the node's data (config panel submit)."""
        node = self._require_node(node_id)
        node.data = {**node.data, **partial}
        self._snapshot()
        self._notify(
            "Node Updated",
            f"Configuration for node '{partial.get('label') or node_id}' applied.",
        )
        return node

    def move_node(
        self,
        node_id: str,
        position: XYPosition | dict[str, float] | tuple[float, float],
    ) -> WorkflowNode:
        """Drag an existing node to ``position``."""
        node = self._require_node(node_id)
        node.position = _as_position(position)
        self._snapshot()
        return node

    def remove_node(self, node_id: str) -> WorkflowNode:
        """Delete a node together with every edge that touches it."""
        node = self._require_node(node_id)
        self.graph.nodes = [n for n in self.graph.nodes if n.id != node_id]
        self.graph.edges = [e for e in self.graph.edges if not e.touches(node_id)]
        self._sync_selection()
        self._snapshot()
        return node

    def remove_edge(self, edge_id: str) -> WorkflowEdge:
        edge = self.graph.get_edge(edge_id)
        if edge is None:
            raise EdgeNotFoundError(f"Edge not found: {edge_id}")
        self.graph.edges = [e for e in self.graph.edges if e.id != edge_id]
        self._snapshot()
        return edge

    def apply_graph(self, graph: WorkflowGraph, explanation: str = "") -> bool:
        """Replace the whole graph (AI rewrite) as one undoable edit."""
        self.graph = restyle_graph(graph)
        self._sync_selection()
        committed = self._snapshot()
        self._notify("AI Changes Applied", explanation)
        return committed

    # ── history ──

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        """Restore the previous history entry. Returns False when there is none."""
        previous = self.history.undo()
        if previous is None:
            self._notify("Cannot Undo", "No previous actions to undo.", NoticeVariant.destructive)
            return False
        self.graph = previous
        self._snapshot()
        self.clear_selection()
        self._notify("Undo Successful", "Reverted to the previous state.")
        return True

    def redo(self) -> bool:
        """Re-apply the entry after the cursor. Returns False when there is none."""
        following = self.history.redo()
        if following is None:
            self._notify("Cannot Redo", "No undone actions to redo.", NoticeVariant.destructive)
            return False
        self.graph = following
        self._snapshot()
        self.clear_selection()
        self._notify("Redo Successful", "Re-applied the next state.")
        return True

    def reset(self) -> None:
        """Return to the graph the session was opened with and drop all history."""
        self.graph = self.history.reset(self.initial_graph)
        self._snapshot()
        self.id_counter.rebase(self.graph.node_ids())
        self.selected_node_id = None
        self.panel = EditorPanel.none
        self._sync_selection()
        self._notify("Workflow Reset", "Workflow has been reset to its initial state.")

    # ── persistence ──

    @property
    def is_saving(self) -> bool:
        return self._saving

    def save(self, client: WorkflowStore, name: str | None = None) -> Workflow | None:
        """Create or update the stored workflow.

        A session without a server id creates a new workflow and needs a
        ``name``; a bound session updates in place. Failures are reported as
        notices and leave the graph untouched; the return value is then None.

        Raises:
            EditorBusyError: a save is already in progress.
            WorkflowNameRequiredError: creating without a name.
        """
        if self._saving:
            raise EditorBusyError("A save is already in progress")
        creating = self.workflow_id is None
        if creating and not (name and name.strip()):
            raise WorkflowNameRequiredError("A name is required to save a new workflow")

        report = check_graph(self.graph)
        if not report.ok:
            logger.warning(f"saving workflow with issues: {'; '.join(report.issues)}")

        self._saving = True
        try:
            if creating:
                saved = client.create(build_create_payload(name.strip(), self.graph))
            else:
                saved = client.update(
                    self.workflow_id,
                    build_update_payload(self.graph, name or self.workflow_name),
                )
        except SessionExpiredError:
            self._notify(
                "Session Expired",
                "Your session has expired. Please log in again.",
                NoticeVariant.destructive,
            )
            return None
        except ApiError as e:
            self._notify(
                "Error Creating Workflow" if creating else "Error Updating Workflow",
                e.message or "An unknown error occurred.",
                NoticeVariant.destructive,
            )
            return None
        finally:
            self._saving = False

        self.workflow_id = saved.id
        self.workflow_name = saved.name
        if creating:
            self._notify("Workflow Created!", f'"{saved.name}" has been successfully saved.')
        else:
            self._notify("Workflow Updated!", f'"{saved.name}" has been successfully updated.')
        return saved
