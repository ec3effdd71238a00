"""Adapters between the editor and the outside world: storage, AI, notices."""

from flowcanvas.adapters.assistant import WorkflowAssistant, reconcile_response
from flowcanvas.adapters.handoff import HandoffSlot, load_generated_graph
from flowcanvas.adapters.sinks import ListSink, LogSink, NoticeSink
from flowcanvas.adapters.wire import (
    InvalidDefinitionError,
    build_create_payload,
    build_update_payload,
    from_wire,
    parse_definition,
    to_wire,
)

__all__ = [
    "NoticeSink",
    "ListSink",
    "LogSink",
    "InvalidDefinitionError",
    "build_create_payload",
    "build_update_payload",
    "from_wire",
    "parse_definition",
    "to_wire",
    "WorkflowAssistant",
    "reconcile_response",
    "HandoffSlot",
    "load_generated_graph",
]
