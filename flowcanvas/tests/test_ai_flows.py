"""Tests for the generate/edit AI flows with a stub chat model."""

import json
import re

import pytest
from langchain_core.messages import HumanMessage, SystemMessage

from flowcanvas.adapters.wire import to_wire
from flowcanvas.editor.workflow_editor import default_graph
from flowcanvas.models.node_data import NodeType
from flowcanvas.models.node_registry import get_definition
from flowcanvas.sdk.ai_flows import (
    ADVERTISED_NODE_TYPES,
    EDIT_SYSTEM_PROMPT,
    GENERATE_SYSTEM_PROMPT,
    EditWorkflowOutput,
    GenerateWorkflowOutput,
    WorkflowFlows,
    WorkflowGenerationError,
    create_llm,
)


class StubLLM:
    """Returns a canned structured response and records what it was sent."""

    def __init__(self, response):
        self.response = response
        self.schemas = []
        self.messages = []

    def with_structured_output(self, schema):
        self.schemas.append(schema)
        return self

    def invoke(self, messages, **kwargs):
        self.messages.append(messages)
        return self.response


CURRENT = to_wire(default_graph()).to_json()


class TestGenerateWorkflow:
    def test_returns_definition(self):
        definition = json.dumps({"nodes": [{"id": "n1", "type": "input"}], "edges": []})
        llm = StubLLM(GenerateWorkflowOutput(workflow_definition=definition))
        result = WorkflowFlows(llm).generate_workflow("When a form is submitted, email the sender")

        assert json.loads(result.workflow_definition)["nodes"][0]["id"] == "n1"
        assert llm.schemas == [GenerateWorkflowOutput]
        system, human = llm.messages[0]
        assert isinstance(system, SystemMessage)
        assert isinstance(human, HumanMessage)
        assert "email the sender" in human.content

    def test_strips_markdown_fences(self):
        llm = StubLLM({"workflowDefinition": '```json\n{"nodes": [], "edges": []}\n```'})
        result = WorkflowFlows(llm).generate_workflow("anything")
        assert result.workflow_definition == '{"nodes": [], "edges": []}'

    def test_invalid_definition_raises(self):
        llm = StubLLM(GenerateWorkflowOutput(workflow_definition='{"steps": []}'))
        with pytest.raises(WorkflowGenerationError):
            WorkflowFlows(llm).generate_workflow("anything")

    def test_serializes_with_aliases(self):
        output = GenerateWorkflowOutput(workflow_definition="{}")
        assert output.model_dump(by_alias=True) == {"workflowDefinition": "{}"}


class TestEditWorkflow:
    """Test validation of edit output."""

    def test_valid_edit(self):
        updated = json.loads(CURRENT)
        updated["nodes"][1]["data"]["label"] = "Review"
        llm = StubLLM(EditWorkflowOutput(
            updated_workflow_json=json.dumps(updated),
            ai_explanation="Renamed the task.",
        ))
        result = WorkflowFlows(llm).edit_workflow("rename the task to Review", CURRENT)
        assert json.loads(result.updated_workflow_json)["nodes"][1]["data"]["label"] == "Review"
        assert result.ai_explanation == "Renamed the task."
        assert CURRENT in llm.messages[0][1].content

    def test_unparseable_json_returns_original(self):
        llm = StubLLM(EditWorkflowOutput(updated_workflow_json="{nodes: oops", ai_explanation="x"))
        result = WorkflowFlows(llm).edit_workflow("do something", CURRENT)
        assert result.updated_workflow_json == CURRENT
        assert result.ai_explanation.startswith("I encountered an issue processing your request.")

    def test_missing_arrays_returns_original(self):
        llm = StubLLM({"updatedWorkflowJSON": '{"nodes": "not-an-array"}', "aiExplanation": "x"})
        result = WorkflowFlows(llm).edit_workflow("do something", CURRENT)
        assert result.updated_workflow_json == CURRENT

    def test_missing_output_returns_original(self):
        result = WorkflowFlows(StubLLM(None)).edit_workflow("do something", CURRENT)
        assert result.updated_workflow_json == CURRENT
        assert "did not return an output" in result.ai_explanation

    def test_wrong_field_types_return_original(self):
        llm = StubLLM({"updatedWorkflowJSON": {"nodes": []}, "aiExplanation": "x"})
        result = WorkflowFlows(llm).edit_workflow("do something", CURRENT)
        assert result.updated_workflow_json == CURRENT
        assert "incorrect types" in result.ai_explanation


class TestCreateLLM:
    def test_unsupported_provider(self):
        with pytest.raises(ValueError):
            create_llm({"provider": "genkit", "model": "x", "temperature": 0, "api_key": None})


class TestPromptNodeTypes:
    """The prompts only offer node types the registry knows."""

    def _offered(self, prompt: str) -> list[str]:
        match = re.search(r"must be one of: (.+?)\.\n", prompt)
        assert match is not None
        return re.findall(r"'([^']+)'", match.group(1))

    def test_every_registered_type_is_offered(self):
        assert set(ADVERTISED_NODE_TYPES) == {t.value for t in NodeType}

    def test_generate_prompt_types_resolve(self):
        offered = self._offered(GENERATE_SYSTEM_PROMPT)
        assert "getFirestoreDocument" in offered
        for tag in offered:
            assert get_definition(tag) is not None, tag

    def test_edit_prompt_types_resolve(self):
        offered = self._offered(EDIT_SYSTEM_PROMPT)
        assert offered == ADVERTISED_NODE_TYPES
        for tag in offered:
            assert get_definition(tag) is not None, tag
