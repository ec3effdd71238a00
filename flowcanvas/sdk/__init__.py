"""Clients for the workflow API and the AI workflow flows."""

from flowcanvas.sdk.ai_flows import (
    EditWorkflowOutput,
    GenerateWorkflowOutput,
    WorkflowFlows,
    WorkflowGenerationError,
)
from flowcanvas.sdk.workflow_client import (
    ApiError,
    SessionExpiredError,
    TokenStore,
    WorkflowClient,
    is_token_expired,
)

__all__ = [
    "ApiError",
    "SessionExpiredError",
    "TokenStore",
    "WorkflowClient",
    "is_token_expired",
    "EditWorkflowOutput",
    "GenerateWorkflowOutput",
    "WorkflowFlows",
    "WorkflowGenerationError",
]
