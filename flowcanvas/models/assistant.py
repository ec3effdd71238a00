"""Models for the AI workflow assistant conversation."""

from enum import Enum

from pydantic import BaseModel

from flowcanvas.models.workflow_graph import WorkflowGraph


class ChatRole(str, Enum):
    user = "user"
    ai = "ai"


class ChatMessage(BaseModel):
    """One line of the assistant transcript. Session-only, never stored."""

    id: str
    role: ChatRole
    text: str


class AssistantReply(BaseModel):
    """Outcome of one assistant request.

    When ``applied`` is False, ``graph`` is the unchanged input graph and
    ``explanation`` says what went wrong.
    """

    graph: WorkflowGraph
    explanation: str
    applied: bool = False
