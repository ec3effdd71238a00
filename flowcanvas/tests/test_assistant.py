"""Tests for AI reply reconciliation and the assistant session."""

import json
import threading

from flowcanvas.adapters.assistant import WorkflowAssistant, reconcile_response
from flowcanvas.adapters.sinks import ListSink
from flowcanvas.adapters.wire import to_wire
from flowcanvas.analysis.graph_check import check_graph
from flowcanvas.editor.workflow_editor import WorkflowEditor, default_graph
from flowcanvas.models.assistant import ChatRole
from flowcanvas.models.node_registry import get_definition
from flowcanvas.models.styles import compute_style
from flowcanvas.sdk.ai_flows import EditWorkflowOutput


def _with_extra_node() -> str:
    payload = to_wire(default_graph()).to_payload()
    payload["nodes"].append({
        "id": "ai_node_1",
        "type": "sendEmail",
        "data": {"label": "Notify"},
        "position": {"x": 500, "y": 300},
        "style": {"background": "red"},
    })
    payload["edges"].append({"id": "ai_edge_1", "source": "2", "target": "ai_node_1"})
    return json.dumps(payload)


class TestReconcileResponse:
    """Test the pure reconciliation step."""

    def test_malformed_nodes_leave_graph_unchanged(self):
        graph = default_graph()
        reply = reconcile_response('{"nodes": "not-an-array"}', "done", graph)
        assert not reply.applied
        assert reply.graph == graph
        assert "invalid workflow structure" in reply.explanation

    def test_unparseable_json(self):
        graph = default_graph()
        reply = reconcile_response("```oops", "done", graph)
        assert not reply.applied
        assert reply.graph is graph

    def test_document_nodes_stay_registered(self):
        """Firestore nodes from an AI reply load as registered types."""
        raw = json.dumps({
            "nodes": [
                {"id": "a", "type": "getFirestoreDocument", "data": {"label": "Fetch"}},
                {"id": "b", "type": "updateFirestoreDocument", "data": {"label": "Save"}},
            ],
            "edges": [{"id": "e", "source": "a", "target": "b"}],
        })
        reply = reconcile_response(raw, "ok", default_graph())
        assert reply.applied
        assert check_graph(reply.graph).unknown_types == []
        for node in reply.graph.nodes:
            assert get_definition(node.type) is not None

    def test_valid_reply_is_rethemed(self):
        reply = reconcile_response(_with_extra_node(), "Added a notify step.", default_graph())
        assert reply.applied
        assert reply.explanation == "Added a notify step."
        node = reply.graph.get_node("ai_node_1")
        assert node.style == compute_style("sendEmail", {"background": "red"})
        assert reply.graph.get_node("1").style == compute_style("input")


class StubService:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def edit_workflow(self, user_prompt, current_workflow_json):
        self.calls.append((user_prompt, current_workflow_json))
        if self.error:
            raise self.error
        return self.response


class TestWorkflowAssistant:
    """Test propose_and_apply against an editor."""

    def setup_method(self):
        self.sink = ListSink()
        self.editor = WorkflowEditor(notice_sink=self.sink)

    def test_applies_valid_reply_once(self):
        service = StubService(EditWorkflowOutput(
            updated_workflow_json=_with_extra_node(),
            ai_explanation="Added a notify step.",
        ))
        assistant = WorkflowAssistant(service)
        reply = assistant.propose_and_apply("add a notify step", self.editor)

        assert reply.applied
        assert len(self.editor.graph.nodes) == 4
        assert len(self.editor.history) == 2
        assert self.sink.titles[-1] == "AI Changes Applied"
        assert [m.role for m in assistant.transcript] == [ChatRole.ai, ChatRole.user, ChatRole.ai]
        assert assistant.transcript[-1].text == "Added a notify step."

        sent = json.loads(service.calls[0][1])
        assert [n["id"] for n in sent["nodes"]] == ["1", "2", "3"]
        assert "style" not in sent["nodes"][0]

    def test_ai_change_is_undoable(self):
        service = StubService({"updatedWorkflowJSON": _with_extra_node(), "aiExplanation": "ok"})
        WorkflowAssistant(service).propose_and_apply("add a notify step", self.editor)
        assert self.editor.undo()
        assert len(self.editor.graph.nodes) == 3

    def test_malformed_reply_not_applied(self):
        service = StubService(EditWorkflowOutput(
            updated_workflow_json='{"nodes": "not-an-array"}',
            ai_explanation="done",
        ))
        assistant = WorkflowAssistant(service)
        reply = assistant.propose_and_apply("break it", self.editor)
        assert not reply.applied
        assert len(self.editor.history) == 1
        assert assistant.transcript[-1].text.startswith("Error: ")

    def test_service_exception_becomes_error_message(self):
        assistant = WorkflowAssistant(StubService(error=RuntimeError("model unavailable")))
        reply = assistant.propose_and_apply("add a delay", self.editor)
        assert not reply.applied
        assert assistant.transcript[-1].text == "Error: model unavailable"
        assert len(self.editor.graph.nodes) == 3

    def test_blank_instruction_ignored(self):
        service = StubService()
        assistant = WorkflowAssistant(service)
        assert assistant.propose_and_apply("   ", self.editor) is None
        assert service.calls == []
        assert len(assistant.transcript) == 1

    def test_second_request_while_busy(self):
        """Only one request may be outstanding."""
        started = threading.Event()
        release = threading.Event()

        class SlowService:
            def edit_workflow(self, user_prompt, current_workflow_json):
                started.set()
                release.wait(5)
                return {"updatedWorkflowJSON": current_workflow_json, "aiExplanation": "no change"}

        assistant = WorkflowAssistant(SlowService())
        worker = threading.Thread(
            target=assistant.propose_and_apply, args=("first", self.editor)
        )
        worker.start()
        started.wait(5)
        try:
            assert assistant.is_busy
            reply = assistant.propose_and_apply("second", self.editor)
            assert not reply.applied
        finally:
            release.set()
            worker.join(5)
        assert not assistant.is_busy
