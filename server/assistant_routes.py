"""API routes exposing the AI workflow flows."""

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from flowcanvas.sdk.ai_flows import (
    EditWorkflowOutput,
    GenerateWorkflowOutput,
    WorkflowFlows,
    WorkflowGenerationError,
)
from server.auth import require_bearer

router = APIRouter(prefix="/ai", dependencies=[Depends(require_bearer)])


class GenerateWorkflowRequest(BaseModel):
    """request body for generating a workflow from a prompt."""

    prompt: str


class EditWorkflowRequest(BaseModel):
    """request body for editing a workflow with an instruction."""

    model_config = ConfigDict(populate_by_name=True)

    user_prompt: str = Field(alias="userPrompt")
    current_workflow_json: str = Field(alias="currentWorkflowJSON")


@lru_cache
def get_flows() -> WorkflowFlows:
    return WorkflowFlows()


@router.post("/generate")
def generate_workflow(
    request: GenerateWorkflowRequest,
    flows: WorkflowFlows = Depends(get_flows),
) -> GenerateWorkflowOutput:
    """generate a workflow definition from a text prompt."""
    if not request.prompt.strip():
        raise HTTPException(status_code=422, detail="Prompt must not be empty")
    try:
        return flows.generate_workflow(request.prompt)
    except WorkflowGenerationError as e:
        raise HTTPException(status_code=502, detail=f"AI returned an unusable workflow: {e}")


@router.post("/edit")
def edit_workflow(
    request: EditWorkflowRequest,
    flows: WorkflowFlows = Depends(get_flows),
) -> EditWorkflowOutput:
    """apply an instruction to a workflow; invalid AI output returns the input unchanged."""
    return flows.edit_workflow(request.user_prompt, request.current_workflow_json)
