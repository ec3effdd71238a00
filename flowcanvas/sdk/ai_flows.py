"""LLM flows that generate a workflow from a prompt or edit an existing one.

Both flows ask the chat model for structured output. The edit flow checks
that the returned JSON is a usable definition and, when it is not, hands the
caller's workflow back unchanged together with an explanation.
"""

from __future__ import annotations

from logging import getLogger
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ConfigDict, Field

from flowcanvas.adapters.wire import InvalidDefinitionError, parse_definition
from flowcanvas.config import get_ai_config
from flowcanvas.models.node_registry import list_types

logger = getLogger(__name__)

# every tag the registry knows, in palette order
ADVERTISED_NODE_TYPES: list[str] = [definition.type for definition in list_types()]
_NODE_TYPES = ", ".join(f"'{tag}'" for tag in ADVERTISED_NODE_TYPES)

GENERATE_SYSTEM_PROMPT = f"""You are an AI workflow generator. Generate a workflow definition in JSON format based on the user's text prompt.

The definition is a JSON object with two arrays, "nodes" and "edges". Each node
represents an action and each edge the flow between two actions.

Node types must be one of: {_NODE_TYPES}.
- 'input' for starting points (a generic start, a scheduled trigger). If the prompt mentions a form, use 'input_form' with a label like "Form: [Form Name] Submitted".
- 'output' for ending points.
- 'assignTask' for task assignments that do not pause the workflow.
- 'humanTask' for steps that pause the workflow until a person completes them (approval, review).
- 'default' for other generic actions.

Every node needs "id", "type" and "data" (with at least a "label"); give it a
"position" {{"x": ..., "y": ...}} laid out left to right when you can.
Every edge needs "id", "source" and "target" referring to existing node ids.

Example:
{{"nodes": [
  {{"id": "node1", "type": "input_form", "data": {{"label": "Form: New Inquiry Submitted"}}}},
  {{"id": "node2", "type": "sendEmail", "data": {{"label": "Send Acknowledgement Email", "to": "{{{{form.email}}}}", "subject": "Inquiry Received", "body": "Thank you for your inquiry."}}}},
  {{"id": "node3", "type": "assignTask", "data": {{"label": "Assign to Sales Rep", "assignee": "sales_team_member_1"}}}}
 ],
 "edges": [
  {{"id": "edge1", "source": "node1", "target": "node2"}},
  {{"id": "edge2", "source": "node2", "target": "node3"}}
 ]}}

Return the definition as a JSON string in the workflowDefinition field."""

EDIT_SYSTEM_PROMPT = f"""You are an AI assistant that helps users modify a visual workflow. The workflow is a JSON object containing 'nodes' and 'edges'.

Modify the current workflow according to the user's request and return:
1. updatedWorkflowJSON: a JSON string with the complete, modified workflow (nodes and edges).
   Keep ids, types, positions, data, sourcePosition, targetPosition, markerEnd and animated status of nodes and edges you do not change.
   New nodes get a reasonable position and a new unique id (e.g. "ai_node_<random>"); new edges get a unique id (e.g. "ai_edge_<random>") and must reference existing or newly created nodes.
   All node types must be one of: {_NODE_TYPES}.
   Use 'assignTask' for assignments that do not pause the workflow and 'humanTask' for steps that pause it until a person completes them.
   Handles should generally be sourcePosition 'right' and targetPosition 'left'.
   New edges should have animated: true.
   Do not set node styles; the editor styles nodes by type.
2. aiExplanation: a brief, user-friendly explanation of the changes (e.g. "Added a 'Send Email' node after 'Form Submit' and connected them.").

If the request is too vague or impossible, explain why in aiExplanation and return the current workflow unchanged as updatedWorkflowJSON."""


class GenerateWorkflowOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    workflow_definition: str = Field(
        alias="workflowDefinition",
        description="The generated workflow definition (nodes and edges) as a JSON string.",
    )


class EditWorkflowOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    updated_workflow_json: str = Field(
        alias="updatedWorkflowJSON",
        description="The modified workflow definition (nodes and edges) as a JSON string.",
    )
    ai_explanation: str = Field(
        alias="aiExplanation",
        description="A brief explanation of the changes made.",
    )


class WorkflowGenerationError(Exception):
    """The model's generated definition is not a usable workflow."""
    pass


def create_llm(config: dict | None = None) -> ChatOpenAI:
    """Build the chat model from ``get_ai_config()`` (or ``config``)."""
    config = config or get_ai_config()
    if config["provider"] != "openai":
        raise ValueError(f"Unsupported AI provider: {config['provider']}")
    kwargs: dict[str, Any] = {
        "model": config["model"],
        "temperature": config["temperature"],
    }
    if config.get("api_key"):
        kwargs["api_key"] = config["api_key"]
    return ChatOpenAI(**kwargs)


def _strip_fences(text: str) -> str:
    # models sometimes wrap the JSON string in a markdown block
    if "```json" in text:
        return text.split("```json")[1].split("```")[0].strip()
    if "```" in text:
        return text.split("```")[1].split("```")[0].strip()
    return text.strip()


def _field(response: Any, alias: str, name: str) -> Any:
    if isinstance(response, dict):
        return response.get(alias, response.get(name))
    return getattr(response, name, None)


class WorkflowFlows:
    """Generate and edit flows bound to one chat model.

    Usage:
        flows = WorkflowFlows()
        out = flows.edit_workflow("add a delay before the email", current_json)
    """

    def __init__(self, llm: Any = None) -> None:
        self._llm = llm

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = create_llm()
        return self._llm

    def generate_workflow(self, prompt: str) -> GenerateWorkflowOutput:
        """Generate a new workflow definition from a text prompt.

        Raises:
            WorkflowGenerationError: the model returned no usable definition.
        """
        structured_llm = self.llm.with_structured_output(GenerateWorkflowOutput)
        response = structured_llm.invoke([
            SystemMessage(content=GENERATE_SYSTEM_PROMPT),
            HumanMessage(content=f"Prompt: {prompt}"),
        ])
        definition = _field(response, "workflowDefinition", "workflow_definition")
        if not isinstance(definition, str):
            raise WorkflowGenerationError("AI did not return a workflow definition.")

        definition = _strip_fences(definition)
        try:
            parse_definition(definition)
        except InvalidDefinitionError as e:
            raise WorkflowGenerationError(str(e)) from e
        return GenerateWorkflowOutput(workflow_definition=definition)

    def edit_workflow(self, user_prompt: str, current_workflow_json: str) -> EditWorkflowOutput:
        """Apply ``user_prompt`` to the workflow in ``current_workflow_json``.

        Never raises for a bad model answer: the current workflow is returned
        with an explanation instead.
        """
        structured_llm = self.llm.with_structured_output(EditWorkflowOutput)
        response = structured_llm.invoke([
            SystemMessage(content=EDIT_SYSTEM_PROMPT),
            HumanMessage(content=(
                f"Current Workflow:\n```json\n{current_workflow_json}\n```\n\n"
                f'User Request: "{user_prompt}"'
            )),
        ])

        try:
            if response is None:
                raise ValueError("AI did not return an output for workflow editing.")
            updated = _field(response, "updatedWorkflowJSON", "updated_workflow_json")
            explanation = _field(response, "aiExplanation", "ai_explanation")
            if not isinstance(updated, str) or not isinstance(explanation, str):
                raise ValueError("AI output is missing required fields or has incorrect types.")
            updated = _strip_fences(updated)
            parse_definition(updated)
        except ValueError as e:
            logger.error(f"AI returned invalid JSON or structure: {e}")
            return EditWorkflowOutput(
                updated_workflow_json=current_workflow_json,
                ai_explanation=(
                    "I encountered an issue processing your request. The AI returned "
                    f"an invalid response structure. Original error: {e}"
                ),
            )
        return EditWorkflowOutput(updated_workflow_json=updated, ai_explanation=explanation)
