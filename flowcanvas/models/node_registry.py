"""Catalog of node types offered by the canvas palette.

Maps a type tag to its display metadata and the default ``data`` a freshly
dropped node starts with.
"""

import copy
from typing import Any

from pydantic import BaseModel

from flowcanvas.models.node_data import NodeType, normalize_type, payload_model_for


class NodeDefinition(BaseModel):
    """palette entry for one node type."""

    type: str
    label: str
    icon: str  # lucide icon name used by the client
    description: str
    is_action_node: bool = False
    default_data: dict[str, Any]


def _defaults(node_type: NodeType, label: str) -> dict[str, Any]:
    """Default payload for a type, straight from its payload model."""
    model = payload_model_for(node_type)
    return model(label=label).model_dump(by_alias=True, exclude_none=True)


def _definition(
    node_type: NodeType,
    label: str,
    icon: str,
    description: str,
    data_label: str | None = None,
    is_action_node: bool = True,
) -> NodeDefinition:
    return NodeDefinition(
        type=node_type.value,
        label=label,
        icon=icon,
        description=description,
        is_action_node=is_action_node,
        default_data=_defaults(node_type, data_label or label),
    )


# palette order
NODE_DEFINITIONS: list[NodeDefinition] = [
    _definition(
        NodeType.start_trigger, "Start Trigger", "LogIn",
        "Generic entry point for a workflow (e.g. manual, scheduled).",
        is_action_node=False,
    ),
    _definition(
        NodeType.form_trigger, "Form Submit Trigger", "ClipboardPaste",
        "Starts workflow on submission of a linked Intake Form.",
        is_action_node=False,
    ),
    _definition(
        NodeType.end, "End Event", "LogOut",
        "Ends the workflow.",
        is_action_node=False,
    ),
    _definition(
        NodeType.generic_task, "Generic Task", "ChevronsRight",
        "A generic action or step.",
        is_action_node=False,
    ),
    _definition(
        NodeType.send_email, "Send Email", "Mail",
        "Automate email communications.",
    ),
    _definition(
        NodeType.run_sql, "Run SQL", "Database",
        "Execute SQL queries.",
    ),
    _definition(
        NodeType.call_webhook, "Call Webhook", "Webhook",
        "Integrate via webhooks.",
    ),
    _definition(
        NodeType.delay, "Delay", "Timer",
        "Introduce timed delays.",
    ),
    _definition(
        NodeType.condition, "Condition", "GitFork",
        "Branch workflows based on conditions.",
        data_label="Condition Logic",
    ),
    _definition(
        NodeType.assign_task, "Assign Task", "UserCheck",
        "Assign tasks to members.",
    ),
    _definition(
        NodeType.human_task, "Human Task", "UserRoundCheck",
        "Pauses the workflow and assigns a task to a person.",
        data_label="Manual Approval Step",
    ),
    _definition(
        NodeType.update_record, "Update Record", "FilePenLine",
        "Modify data records.",
    ),
    _definition(
        NodeType.get_document, "Get Firestore Document", "FileSearch",
        "Fetch a document from a Firestore collection.",
        data_label="Get Document",
    ),
    _definition(
        NodeType.update_document, "Update Firestore Document", "FilePenLine",
        "Create or update a document in a Firestore collection.",
        data_label="Update Document",
    ),
]

_BY_TYPE: dict[str, NodeDefinition] = {d.type: d for d in NODE_DEFINITIONS}


def list_types() -> list[NodeDefinition]:
    """All node definitions, in palette order."""
    return list(NODE_DEFINITIONS)


def get_definition(node_type: NodeType | str) -> NodeDefinition | None:
    return _BY_TYPE.get(normalize_type(node_type))


def initial_data_for(node_type: NodeType | str, fallback_label: str) -> dict[str, Any]:
    """Starting ``data`` for a new node of ``node_type``.

    Always an independent deep copy of the template, so editing one node's
    nested lists (cc, fieldsToUpdate, ...) never leaks into another. Unknown
    types fall back to ``{"type": node_type, "label": fallback_label}``.
    """
    definition = get_definition(node_type)
    if definition is None:
        return {"type": normalize_type(node_type), "label": fallback_label}
    data = copy.deepcopy(definition.default_data)
    if not data.get("label"):
        data["label"] = fallback_label
    return data


def icon_for(node_type: NodeType | str) -> str | None:
    definition = get_definition(node_type)
    return definition.icon if definition else None
