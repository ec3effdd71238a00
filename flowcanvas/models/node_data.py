"""Node type tags and the per-type configuration payloads.

Each node type carries its own payload shape. The payloads are kept as plain
dicts on the node (so partial updates are a shallow merge), and are validated
against the model registered for the node's type on demand.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    """Workflow step types, valued by their wire tags.

    Lookup also accepts member names in snake or kebab case, so
    ``NodeType("send-email") is NodeType.send_email``.
    """

    start_trigger = "input"
    form_trigger = "input_form"
    end = "output"
    generic_task = "default"
    send_email = "sendEmail"
    run_sql = "runSql"
    call_webhook = "callWebhook"
    delay = "delay"
    condition = "condition"
    assign_task = "assignTask"
    human_task = "humanTask"
    update_record = "updateRecord"
    get_document = "getFirestoreDocument"
    update_document = "updateFirestoreDocument"

    @classmethod
    def _missing_(cls, value: object) -> "NodeType | None":
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().lower().replace("-", "_"))
            if member is not None:
                return member
        return None


def normalize_type(node_type: "NodeType | str") -> str:
    """Return the wire tag for ``node_type``.

    Unknown tags pass through unchanged so that graphs from newer backends or
    from the AI service still load.
    """
    if isinstance(node_type, NodeType):
        return node_type.value
    try:
        return NodeType(node_type).value
    except ValueError:
        return node_type


class NodeData(BaseModel):
    """Base payload: every node has a label. Extra keys are preserved."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    label: str = ""


class StartTriggerData(NodeData):
    type: Literal["input"] = "input"


class FormTriggerData(NodeData):
    type: Literal["input_form"] = "input_form"
    form_id: str | None = Field(default=None, alias="formId")


class EndData(NodeData):
    type: Literal["output"] = "output"


class GenericTaskData(NodeData):
    type: Literal["default"] = "default"


class SendEmailData(NodeData):
    type: Literal["sendEmail"] = "sendEmail"
    to: str = ""
    subject: str = ""
    body: str = ""
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)


class RunSqlData(NodeData):
    type: Literal["runSql"] = "runSql"
    connection_id: str = Field(default="", alias="connectionId")
    query: str = ""


class CallWebhookData(NodeData):
    type: Literal["callWebhook"] = "callWebhook"
    url: str = ""
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "GET"


class DelayData(NodeData):
    type: Literal["delay"] = "delay"
    duration: float = 60
    unit: Literal["seconds", "minutes", "hours", "days"] = "seconds"


class ConditionLogic(BaseModel):
    """A single ``variable operator value`` test."""

    model_config = ConfigDict(extra="allow")

    variable: str = ""
    operator: str = "contains"
    value: Any = ""


class ConditionData(NodeData):
    type: Literal["condition"] = "condition"
    logic: ConditionLogic = Field(default_factory=ConditionLogic)


class AssignTaskData(NodeData):
    type: Literal["assignTask"] = "assignTask"
    assignee: str = ""


class HumanTaskData(NodeData):
    """Pauses the workflow until the assignee completes the task."""

    type: Literal["humanTask"] = "humanTask"
    assignee: str = ""
    task_title: str = Field(default="Please review and approve.", alias="taskTitle")


class FieldUpdate(BaseModel):
    column: str = ""
    value: Any = ""


class UpdateRecordData(NodeData):
    type: Literal["updateRecord"] = "updateRecord"
    fields_to_update: list[FieldUpdate] = Field(default_factory=list, alias="fieldsToUpdate")


class DocumentFieldUpdate(BaseModel):
    key: str = ""
    value: Any = ""


class GetDocumentData(NodeData):
    type: Literal["getFirestoreDocument"] = "getFirestoreDocument"
    collection_path: str = Field(default="", alias="collectionPath")
    document_id: str = Field(default="", alias="documentId")


class UpdateDocumentData(NodeData):
    type: Literal["updateFirestoreDocument"] = "updateFirestoreDocument"
    collection_path: str = Field(default="", alias="collectionPath")
    document_id: str = Field(default="", alias="documentId")
    fields_to_update: list[DocumentFieldUpdate] = Field(
        default_factory=list, alias="fieldsToUpdate"
    )


PAYLOAD_MODELS: dict[str, type[NodeData]] = {
    NodeType.start_trigger.value: StartTriggerData,
    NodeType.form_trigger.value: FormTriggerData,
    NodeType.end.value: EndData,
    NodeType.generic_task.value: GenericTaskData,
    NodeType.send_email.value: SendEmailData,
    NodeType.run_sql.value: RunSqlData,
    NodeType.call_webhook.value: CallWebhookData,
    NodeType.delay.value: DelayData,
    NodeType.condition.value: ConditionData,
    NodeType.assign_task.value: AssignTaskData,
    NodeType.human_task.value: HumanTaskData,
    NodeType.update_record.value: UpdateRecordData,
    NodeType.get_document.value: GetDocumentData,
    NodeType.update_document.value: UpdateDocumentData,
}


def payload_model_for(node_type: NodeType | str) -> type[NodeData]:
    """Payload model for a type; unknown types get the permissive base."""
    return PAYLOAD_MODELS.get(normalize_type(node_type), NodeData)


def parse_node_data(node_type: NodeType | str, data: dict[str, Any]) -> NodeData:
    """Validate a node's data dict against its type's payload model.

    The node's own type wins over any ``type`` key inside ``data``.

    Raises:
        pydantic.ValidationError: if the payload does not fit the type.
    """
    tag = normalize_type(node_type)
    return payload_model_for(tag).model_validate({**data, "type": tag})
