"""Tests for the undo history stack."""

from flowcanvas.editor.history import HistoryStack, HistoryState
from flowcanvas.models.workflow_graph import WorkflowGraph, WorkflowNode


def _graph(*labels: str) -> WorkflowGraph:
    return WorkflowGraph(
        nodes=[WorkflowNode(id=str(i), data={"label": label}) for i, label in enumerate(labels)]
    )


class TestCommit:
    """Test recording new entries."""

    def setup_method(self):
        self.history = HistoryStack(_graph("a"))

    def test_initial_entry(self):
        assert len(self.history) == 1
        assert self.history.index == 0
        assert not self.history.can_undo
        assert not self.history.can_redo

    def test_commit_appends(self):
        assert self.history.commit(_graph("a", "b"))
        assert len(self.history) == 2
        assert self.history.index == 1

    def test_equal_graph_not_recorded(self):
        assert not self.history.commit(_graph("a"))
        assert len(self.history) == 1

    def test_entries_are_copies(self):
        """Mutating a committed graph does not change the stored entry."""
        graph = _graph("a", "b")
        self.history.commit(graph)
        graph.nodes[0].data["label"] = "mutated"
        assert self.history.current.nodes[0].data["label"] == "a"
        self.history.current.nodes[0].data["label"] = "also mutated"
        assert self.history.entries[1].nodes[0].data["label"] == "a"

    def test_empty_stack(self):
        history = HistoryStack()
        assert history.current is None
        assert history.commit(_graph("x"))
        assert history.index == 0


class TestUndoRedo:
    """Test cursor movement and the restoring flag."""

    def setup_method(self):
        self.history = HistoryStack(_graph("a"))
        self.history.commit(_graph("a", "b"))
        self.history.commit(_graph("a", "b", "c"))

    def test_undo_returns_previous(self):
        restored = self.history.undo()
        assert [n.data["label"] for n in restored.nodes] == ["a", "b"]
        assert self.history.state is HistoryState.restoring

    def test_commit_after_restore_is_absorbed(self):
        """The snapshot cycle right after a restore records nothing."""
        restored = self.history.undo()
        assert not self.history.commit(restored)
        assert self.history.state is HistoryState.recording
        assert len(self.history) == 3

    def test_undo_at_first_entry(self):
        self.history.undo()
        self.history.commit(self.history.current)
        self.history.undo()
        self.history.commit(self.history.current)
        assert self.history.undo() is None
        assert self.history.index == 0

    def test_redo(self):
        self.history.commit(self.history.undo())
        restored = self.history.redo()
        assert len(restored.nodes) == 3
        assert self.history.redo() is None

    def test_commit_after_undo_discards_redo(self):
        """A new edit after undo drops the undone entries."""
        self.history.commit(self.history.undo())
        self.history.commit(_graph("a", "b", "z"))
        assert len(self.history) == 3
        assert not self.history.can_redo
        assert self.history.redo() is None
        assert self.history.current.nodes[2].data["label"] == "z"


class TestReset:
    def test_reset_collapses_history(self):
        history = HistoryStack(_graph("a"))
        history.commit(_graph("a", "b"))
        restored = history.reset(_graph("a"))
        assert len(history) == 1
        assert history.index == 0
        assert restored == _graph("a")
        assert not history.commit(restored)
        assert len(history) == 1
