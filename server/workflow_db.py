"""SQLite storage for workflows.

Name, status and the template flag are real columns so listings can filter
on them; the definition is kept as JSON exactly as the client sent it.
"""

import os
import sqlite3
from pathlib import Path

from flowcanvas.models.workflow import Workflow, WorkflowDefinition, WorkflowStatus

DEFAULT_DB_PATH = Path(__file__).parent / "data" / "workflows.db"
WORKFLOW_DB_PATH = Path(os.getenv("WORKFLOW_DB_PATH", str(DEFAULT_DB_PATH)))

_COLUMNS = "workflow_id, name, status, is_template, definition_json, created_at, updated_at"


def _connect() -> sqlite3.Connection:
    WORKFLOW_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(WORKFLOW_DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def _dump_definition(definition: WorkflowDefinition) -> str:
    return definition.model_dump_json(by_alias=True, exclude_none=True)


def _to_workflow(row: sqlite3.Row) -> Workflow:
    return Workflow(
        id=row["workflow_id"],
        name=row["name"],
        status=WorkflowStatus(row["status"]),
        is_template=bool(row["is_template"]),
        definition=WorkflowDefinition.model_validate_json(row["definition_json"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def init_db() -> None:
    with _connect() as conn:
        conn.executescript(
            """
            create table if not exists workflows (
                workflow_id text primary key,
                name text not null,
                status text not null default 'Draft',
                is_template integer not null default 0,
                definition_json text not null,
                created_at text not null,
                updated_at text not null
            );
            create index if not exists idx_workflows_status
                on workflows (status, updated_at);
            """
        )


def insert_workflow(workflow: Workflow) -> None:
    with _connect() as conn:
        conn.execute(
            f"insert into workflows ({_COLUMNS}) values (?, ?, ?, ?, ?, ?, ?)",
            (
                workflow.id,
                workflow.name,
                workflow.status.value,
                int(workflow.is_template),
                _dump_definition(workflow.definition),
                workflow.created_at,
                workflow.updated_at,
            ),
        )


def update_workflow(
    workflow_id: str,
    updated_at: str,
    name: str | None = None,
    status: WorkflowStatus | None = None,
    is_template: bool | None = None,
    definition: WorkflowDefinition | None = None,
) -> Workflow | None:
    """Set the given columns and bump ``updated_at``; ``created_at`` is never written.

    Returns the stored workflow after the update, or None when the id is unknown.
    """
    assignments = ["updated_at = ?"]
    params: list = [updated_at]
    if name is not None:
        assignments.append("name = ?")
        params.append(name)
    if status is not None:
        assignments.append("status = ?")
        params.append(status.value)
    if is_template is not None:
        assignments.append("is_template = ?")
        params.append(int(is_template))
    if definition is not None:
        assignments.append("definition_json = ?")
        params.append(_dump_definition(definition))

    with _connect() as conn:
        cursor = conn.execute(
            f"update workflows set {', '.join(assignments)} where workflow_id = ?",
            (*params, workflow_id),
        )
        if cursor.rowcount == 0:
            return None
    return get_workflow(workflow_id)


def get_workflow(workflow_id: str) -> Workflow | None:
    with _connect() as conn:
        row = conn.execute(
            f"select {_COLUMNS} from workflows where workflow_id = ?",
            (workflow_id,),
        ).fetchone()
    return _to_workflow(row) if row else None


def list_workflows(
    status: WorkflowStatus | None = None,
    is_template: bool | None = None,
) -> list[Workflow]:
    """Stored workflows, most recently updated first, optionally filtered."""
    clauses: list[str] = []
    params: list = []
    if status is not None:
        clauses.append("status = ?")
        params.append(status.value)
    if is_template is not None:
        clauses.append("is_template = ?")
        params.append(int(is_template))
    where = f" where {' and '.join(clauses)}" if clauses else ""

    with _connect() as conn:
        rows = conn.execute(
            f"select {_COLUMNS} from workflows{where} order by updated_at desc",
            params,
        ).fetchall()
    return [_to_workflow(row) for row in rows]


def count_by_status() -> dict[str, int]:
    """Number of stored workflows per status, every status present."""
    counts = {status.value: 0 for status in WorkflowStatus}
    with _connect() as conn:
        for row in conn.execute("select status, count(*) as n from workflows group by status"):
            counts[row["status"]] = row["n"]
    return counts


def delete_workflow(workflow_id: str) -> bool:
    """Delete a workflow; False when nothing matched."""
    with _connect() as conn:
        cursor = conn.execute("delete from workflows where workflow_id = ?", (workflow_id,))
        return cursor.rowcount > 0
