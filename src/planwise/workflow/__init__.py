"""AI workflow clients."""

from planwise.workflow.base import (
    WorkflowClient,
    WorkflowError,
    WorkflowNotConfiguredError,
    WorkflowRequest,
    WorkflowResponse,
    WorkflowTimeoutError,
)
from planwise.workflow.n8n import N8NWorkflowClient

__all__ = [
    "N8NWorkflowClient",
    "WorkflowClient",
    "WorkflowError",
    "WorkflowNotConfiguredError",
    "WorkflowRequest",
    "WorkflowResponse",
    "WorkflowTimeoutError",
]
