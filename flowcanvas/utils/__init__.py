"""Utility functions for the workflow canvas."""

from flowcanvas.utils.identifiers import (
    DND_NODE_PREFIX,
    NodeIdCounter,
    generate_edge_id,
    generate_message_id,
    generate_workflow_id,
    parse_dnd_index,
    utc_timestamp,
)

__all__ = [
    "DND_NODE_PREFIX",
    "NodeIdCounter",
    "generate_edge_id",
    "generate_message_id",
    "generate_workflow_id",
    "parse_dnd_index",
    "utc_timestamp",
]
