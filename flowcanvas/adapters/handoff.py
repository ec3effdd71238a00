"""Single-read handoff of a generated workflow into a new editor session.

The generator page puts the workflow JSON it received into the slot; the
editor takes it once when it opens, so a reload starts from the default
graph again.
"""

import random
import threading
from logging import getLogger
from typing import Any

from flowcanvas.adapters.wire import parse_definition
from flowcanvas.models.styles import restyle_graph
from flowcanvas.models.workflow_graph import (
    HandlePosition,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    XYPosition,
)

logger = getLogger(__name__)

HANDOFF_KEY = "aiGeneratedWorkflow"


class HandoffSlot:
    """Keyed, thread-safe store whose values are consumed on first read."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, raw_json: str, key: str = HANDOFF_KEY) -> None:
        with self._lock:
            self._values[key] = raw_json

    def take(self, key: str = HANDOFF_KEY) -> str | None:
        """Return and remove the stored value (None when empty)."""
        with self._lock:
            return self._values.pop(key, None)

    def peek(self, key: str = HANDOFF_KEY) -> str | None:
        with self._lock:
            return self._values.get(key)


def _random_position() -> XYPosition:
    return XYPosition(x=random.random() * 400, y=random.random() * 400)


def load_generated_graph(raw: str | dict[str, Any]) -> WorkflowGraph:
    """Build a canvas graph from generator output, filling in what it omits.

    Nodes without a position land somewhere in the 400x400 top-left area,
    nodes without data get ``{"label": "Untitled Node"}`` and handles
    default to right (source) and left (target).

    Raises:
        InvalidDefinitionError: the JSON is not a nodes/edges definition.
    """
    definition = parse_definition(raw)

    nodes = []
    for wire in definition.nodes:
        nodes.append(WorkflowNode(
            id=wire.id,
            type=wire.type,
            position=wire.position.model_copy() if wire.position else _random_position(),
            data=dict(wire.data) if wire.data else {"label": "Untitled Node"},
            style=dict(wire.style) if wire.style else {},
            width=wire.width,
            height=wire.height,
            source_position=wire.source_position or HandlePosition.right,
            target_position=wire.target_position or HandlePosition.left,
        ))

    edges = [
        WorkflowEdge(
            id=wire.id,
            source=wire.source,
            target=wire.target,
            animated=bool(wire.animated),
            marker_end=wire.marker_end,
            style=wire.style,
        )
        for wire in definition.edges
    ]
    logger.info(f"Loaded generated workflow with {len(nodes)} nodes and {len(edges)} edges")
    return restyle_graph(WorkflowGraph(nodes=nodes, edges=edges))
