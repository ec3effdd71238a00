"""ID generation and timestamp utilities."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

# prefix for nodes created by dragging from the palette
DND_NODE_PREFIX = "dndnode_"


@dataclass
class NodeIdCounter:
    """Per-session counter for palette-created node ids.

    Loading or resetting a graph rebases the counter to the highest
    ``dndnode_<n>`` already present. Between rebases ids are not reused; after
    ``reset`` drops added nodes, their ids can be issued again.
    """

    value: int = 0

    def next_id(self) -> str:
        """Return the next node id (``dndnode_<n>``)."""
        self.value += 1
        return f"{DND_NODE_PREFIX}{self.value}"

    def rebase(self, node_ids: Iterable[str]) -> int:
        """Reset the counter to the max dnd index found in ``node_ids``."""
        self.value = max(
            (n for n in (parse_dnd_index(i) for i in node_ids) if n is not None),
            default=0,
        )
        return self.value


def parse_dnd_index(node_id: str) -> int | None:
    """Return ``n`` for ids shaped like ``dndnode_<n>``, else None."""
    if not node_id.startswith(DND_NODE_PREFIX):
        return None
    suffix = node_id[len(DND_NODE_PREFIX):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def generate_edge_id(source: str, target: str) -> str:
    """Generate a unique edge ID for a new connection."""
    return f"e{source}-{target}-{uuid.uuid4().hex[:8]}"


def generate_workflow_id() -> str:
    """Generate a unique workflow ID (UUID4)."""
    return str(uuid.uuid4())


def generate_message_id() -> str:
    """Generate a transcript message ID (16-char hex string)."""
    return uuid.uuid4().hex[:16]


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
