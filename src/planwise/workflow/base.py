"""Base workflow client interface and types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from planwise.errors import PlanwiseError


@dataclass
class WorkflowRequest:
    """Payload forwarded to the AI workflow."""

    text_note: str | None
    analysis_type: str
    messages: list[dict[str, Any]]
    current_activity: str | None = None
    energy_level: str | None = None
    tags: list[str] = field(default_factory=list)
    session_duration: float = 0
    curriculum_query: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire format expected by the webhook."""
        return {
            "textNote": self.text_note,
            "currentActivity": self.current_activity,
            "energyLevel": self.energy_level,
            "tags": self.tags,
            "sessionDuration": self.session_duration,
            "curriculumQuery": self.curriculum_query,
            "analysisType": self.analysis_type,
            "messagesForModel": self.messages,
        }


@dataclass
class WorkflowResponse:
    """Response from the AI workflow."""

    raw_text: str
    payload: Any  # parsed JSON, or raw_text when the body is not JSON
    status_code: int = 200
    latency_ms: int = 0


class WorkflowClient(ABC):
    """
    Abstract base class for AI workflow clients.

    The workflow is opaque: it takes a message list and returns text or
    JSON that should, but need not, match the requested schema.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Workflow backend name (e.g., 'n8n')."""
        ...

    @abstractmethod
    async def run(self, request: WorkflowRequest) -> WorkflowResponse:
        """
        Send a request to the workflow.

        Raises:
            WorkflowNotConfiguredError if the backend has no endpoint
            WorkflowError on transport failure or timeout
        """
        ...

    async def close(self) -> None:
        """Close connections. Override in subclasses if needed."""
        pass


class WorkflowError(PlanwiseError):
    """The workflow could not be reached or did not answer."""

    def __init__(self, message: str, workflow: str):
        super().__init__(message)
        self.workflow = workflow


class WorkflowTimeoutError(WorkflowError):
    """The workflow did not answer within the configured timeout."""

    def __init__(self, workflow: str, timeout_s: float):
        super().__init__(f"{workflow} did not respond within {timeout_s:g}s", workflow)
        self.timeout_s = timeout_s


class WorkflowNotConfiguredError(WorkflowError):
    """No webhook URL is configured."""

    def __init__(self, workflow: str, setting: str):
        super().__init__(f"{setting} not configured", workflow)
        self.setting = setting
