"""API routes for workflow persistence."""

from fastapi import APIRouter, Depends, HTTPException

from flowcanvas.models.workflow import Workflow, WorkflowCreate, WorkflowStatus, WorkflowUpdate
from flowcanvas.utils.identifiers import generate_workflow_id, utc_timestamp
from server import workflow_db
from server.auth import require_bearer

router = APIRouter(dependencies=[Depends(require_bearer)])


def _require_name(name: str) -> str:
    if not name.strip():
        raise HTTPException(status_code=422, detail="Workflow name must not be empty")
    return name.strip()


@router.get("/workflows", response_model_by_alias=True, response_model_exclude_none=True)
def list_workflows(
    status: WorkflowStatus | None = None,
    is_template: bool | None = None,
) -> list[Workflow]:
    """list stored workflows, most recently updated first.

    ``?status=Active`` and ``?is_template=true`` narrow the listing.
    """
    return workflow_db.list_workflows(status=status, is_template=is_template)


@router.post(
    "/workflows", status_code=201,
    response_model_by_alias=True, response_model_exclude_none=True,
)
def create_workflow(request: WorkflowCreate) -> Workflow:
    now = utc_timestamp()
    workflow = Workflow(
        id=generate_workflow_id(),
        name=_require_name(request.name),
        status=request.status or WorkflowStatus.draft,
        is_template=bool(request.is_template),
        definition=request.definition,
        created_at=now,
        updated_at=now,
    )
    workflow_db.insert_workflow(workflow)
    return workflow


@router.get("/workflows/{workflow_id}", response_model_by_alias=True, response_model_exclude_none=True)
def get_workflow(workflow_id: str) -> Workflow:
    workflow = workflow_db.get_workflow(workflow_id)
    if not workflow:
        raise HTTPException(status_code=404, detail=f"Workflow not found: {workflow_id}")
    return workflow


@router.put("/workflows/{workflow_id}", response_model_by_alias=True, response_model_exclude_none=True)
def update_workflow(workflow_id: str, request: WorkflowUpdate) -> Workflow:
    """update the fields present in the request body; the rest keep their stored values."""
    workflow = workflow_db.update_workflow(
        workflow_id,
        updated_at=utc_timestamp(),
        name=_require_name(request.name) if request.name is not None else None,
        status=request.status,
        is_template=request.is_template,
        definition=request.definition,
    )
    if not workflow:
        raise HTTPException(status_code=404, detail=f"Workflow not found: {workflow_id}")
    return workflow


@router.delete("/workflows/{workflow_id}")
def delete_workflow(workflow_id: str) -> dict:
    if not workflow_db.delete_workflow(workflow_id):
        raise HTTPException(status_code=404, detail=f"Workflow not found: {workflow_id}")
    return {"deleted": workflow_id}
