"""Linear undo history for the canvas graph.

The stack holds immutable snapshots plus a cursor. The editor ends every graph
application with one ``commit`` call (a "snapshot cycle"). Restoring a
snapshot (undo, redo, reset) switches the stack to ``restoring`` so that the
snapshot cycle that follows the restore is absorbed instead of recorded.
"""

from enum import Enum
from logging import getLogger

from flowcanvas.models.workflow_graph import WorkflowGraph

logger = getLogger(__name__)


class HistoryState(str, Enum):
    recording = "recording"
    restoring = "restoring"


class HistoryStack:
    """Ordered graph snapshots with a cursor at the live state."""

    def __init__(self, initial: WorkflowGraph | None = None) -> None:
        self._entries: list[WorkflowGraph] = []
        self._index = -1
        self.state = HistoryState.recording
        if initial is not None:
            self._entries.append(initial.model_copy(deep=True))
            self._index = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> WorkflowGraph | None:
        """Copy of the entry at the cursor."""
        if self._index < 0:
            return None
        return self._entries[self._index].model_copy(deep=True)

    @property
    def entries(self) -> list[WorkflowGraph]:
        return [entry.model_copy(deep=True) for entry in self._entries]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._index < len(self._entries) - 1

    def commit(self, graph: WorkflowGraph) -> bool:
        """Record ``graph`` as the newest state.

        Returns True when an entry was appended. Nothing is recorded when the
        stack is restoring (the flag is cleared instead), or when ``graph``
        equals the entry at the cursor. Entries past the cursor are discarded
        before appending.
        """
        if self.state is HistoryState.restoring:
            self.state = HistoryState.recording
            return False

        if self._index >= 0 and self._entries[self._index].snapshot_key() == graph.snapshot_key():
            return False

        del self._entries[self._index + 1:]
        self._entries.append(graph.model_copy(deep=True))
        self._index = len(self._entries) - 1
        logger.debug(f"history commit: {len(self._entries)} entries, cursor {self._index}")
        return True

    def undo(self) -> WorkflowGraph | None:
        """Step the cursor back; returns the graph to restore, or None."""
        if not self.can_undo:
            return None
        self.state = HistoryState.restoring
        self._index -= 1
        return self._entries[self._index].model_copy(deep=True)

    def redo(self) -> WorkflowGraph | None:
        """Step the cursor forward again; returns the graph to restore, or None."""
        if not self.can_redo:
            return None
        self.state = HistoryState.restoring
        self._index += 1
        return self._entries[self._index].model_copy(deep=True)

    def reset(self, graph: WorkflowGraph) -> WorkflowGraph:
        """Collapse history to the single entry ``graph``."""
        self.state = HistoryState.restoring
        self._entries = [graph.model_copy(deep=True)]
        self._index = 0
        return graph.model_copy(deep=True)
