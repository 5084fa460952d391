"""n8n webhook client for the analysis workflow."""

import json
import logging
import time

import httpx

from planwise.workflow.base import (
    WorkflowClient,
    WorkflowError,
    WorkflowNotConfiguredError,
    WorkflowRequest,
    WorkflowResponse,
    WorkflowTimeoutError,
)

logger = logging.getLogger(__name__)


class N8NWorkflowClient(WorkflowClient):
    """
    Client for an n8n webhook that runs the AI agent.

    The webhook body is returned whatever its status code: n8n reports
    agent failures in the body, and the caller decides whether anything
    usable came back.
    """

    def __init__(
        self,
        webhook_url: str | None,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.timeout_s = timeout_s
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    @property
    def name(self) -> str:
        return "n8n"

    async def run(self, request: WorkflowRequest) -> WorkflowResponse:
        """POST the analysis payload to the webhook."""
        if not self.webhook_url:
            raise WorkflowNotConfiguredError(self.name, "N8N_WEBHOOK_URL")

        start_time = time.monotonic()

        try:
            response = await self._client.post(
                self.webhook_url,
                json=request.to_payload(),
            )
        except httpx.TimeoutException:
            raise WorkflowTimeoutError(self.name, self.timeout_s)
        except httpx.HTTPError as e:
            raise WorkflowError(str(e) or type(e).__name__, self.name)

        latency_ms = int((time.monotonic() - start_time) * 1000)
        raw_text = response.text

        if response.status_code >= 400:
            logger.warning(
                "n8n webhook answered %s after %dms", response.status_code, latency_ms
            )

        try:
            payload = json.loads(raw_text)
        except json.JSONDecodeError:
            payload = raw_text

        return WorkflowResponse(
            raw_text=raw_text,
            payload=payload,
            status_code=response.status_code,
            latency_ms=latency_ms,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
