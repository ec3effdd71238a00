"""AI assistant adapter: send the live graph to an edit service, apply the reply.

``reconcile_response`` is pure: it turns the service's JSON string into a
graph, or explains why it could not. ``WorkflowAssistant`` drives one chat
session against an editor and keeps the transcript.
"""

from __future__ import annotations

import threading
from logging import getLogger
from typing import TYPE_CHECKING, Any, Protocol

from flowcanvas.adapters.wire import InvalidDefinitionError, from_wire, parse_definition, to_wire
from flowcanvas.models.assistant import AssistantReply, ChatMessage, ChatRole
from flowcanvas.models.styles import restyle_graph
from flowcanvas.models.workflow_graph import WorkflowGraph
from flowcanvas.utils.identifiers import generate_message_id

if TYPE_CHECKING:
    from flowcanvas.editor.workflow_editor import WorkflowEditor

logger = getLogger(__name__)

GREETING = (
    "Hello! How can I help you modify this workflow today? "
    "You can ask me to add, remove, or change nodes and connections."
)


class EditService(Protocol):
    """Anything with the ``edit_workflow`` flow signature."""

    def edit_workflow(self, user_prompt: str, current_workflow_json: str) -> Any: ...


def reconcile_response(
    updated_json: str,
    explanation: str,
    current_graph: WorkflowGraph,
) -> AssistantReply:
    """Turn an edit service reply into the graph to apply.

    Args:
        updated_json: the ``updatedWorkflowJSON`` string from the service
        explanation: the service's explanation of its changes
        current_graph: graph the request was made against

    Returns:
        AssistantReply with ``applied=True`` and the re-themed new graph, or
        ``applied=False`` with ``current_graph`` untouched and an explanation
        of what was wrong with the reply.
    """
    try:
        definition = parse_definition(updated_json)
    except InvalidDefinitionError as e:
        logger.warning(f"Discarding AI workflow update: {e}")
        return AssistantReply(
            graph=current_graph,
            explanation=f"Failed to apply AI changes. The AI returned an invalid workflow structure: {e}",
            applied=False,
        )

    graph = restyle_graph(from_wire(definition))
    return AssistantReply(graph=graph, explanation=explanation, applied=True)


def _read(response: Any, name: str, alias: str) -> Any:
    if isinstance(response, dict):
        return response.get(alias, response.get(name))
    return getattr(response, name, None)


class WorkflowAssistant:
    """Chat session that edits a workflow through an AI service.

    The transcript lives only as long as this object.
    """

    def __init__(self, service: EditService) -> None:
        self.service = service
        self.transcript: list[ChatMessage] = [
            ChatMessage(id=generate_message_id(), role=ChatRole.ai, text=GREETING)
        ]
        self._lock = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    def _say(self, role: ChatRole, text: str) -> None:
        self.transcript.append(ChatMessage(id=generate_message_id(), role=role, text=text))

    def propose_and_apply(self, instruction: str, editor: WorkflowEditor) -> AssistantReply | None:
        """Ask the service to apply ``instruction`` to the editor's graph.

        On a valid reply the editor receives the new graph through
        ``apply_graph`` (one history entry). Returns None for a blank
        instruction; otherwise the reply, whether applied or not.
        """
        instruction = instruction.strip()
        if not instruction:
            return None

        if not self._lock.acquire(blocking=False):
            return AssistantReply(
                graph=editor.graph,
                explanation="Another request is still being processed.",
                applied=False,
            )
        try:
            self._say(ChatRole.user, instruction)
            current_graph = editor.graph
            current_json = to_wire(current_graph).to_json()
            try:
                response = self.service.edit_workflow(instruction, current_json)
                updated_json = _read(response, "updated_workflow_json", "updatedWorkflowJSON")
                explanation = _read(response, "ai_explanation", "aiExplanation") or ""
                if not isinstance(updated_json, str):
                    raise ValueError("The AI response did not include a workflow.")
            except Exception as e:
                logger.error(f"Workflow assistant request failed: {e}")
                self._say(ChatRole.ai, f"Error: {e}")
                return AssistantReply(
                    graph=current_graph,
                    explanation=f"Failed to get a response from the AI: {e}",
                    applied=False,
                )

            reply = reconcile_response(updated_json, explanation, current_graph)
            if reply.applied:
                editor.apply_graph(reply.graph, reply.explanation)
                self._say(ChatRole.ai, reply.explanation or "Changes applied.")
            else:
                self._say(ChatRole.ai, f"Error: {reply.explanation}")
            return reply
        finally:
            self._lock.release()
