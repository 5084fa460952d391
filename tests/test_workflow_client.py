"""Tests for the n8n workflow client."""

import json

import httpx
import pytest

from planwise.workflow import (
    N8NWorkflowClient,
    WorkflowError,
    WorkflowNotConfiguredError,
    WorkflowRequest,
    WorkflowTimeoutError,
)

WEBHOOK_URL = "http://n8n.test/webhook/analyze"


def make_request() -> WorkflowRequest:
    return WorkflowRequest(
        text_note="رمى القلم",
        analysis_type="behavior",
        messages=[{"role": "user", "content": "hi"}],
        tags=["غضب"],
        session_duration=15,
    )


class TestN8NWorkflowClient:
    @pytest.mark.asyncio
    async def test_posts_payload_and_parses_json(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=[{"output": '{"summary": "ok"}'}])

        client = N8NWorkflowClient(WEBHOOK_URL, transport=httpx.MockTransport(handler))
        response = await client.run(make_request())
        await client.close()

        assert seen["url"] == WEBHOOK_URL
        assert seen["body"] == {
            "textNote": "رمى القلم",
            "currentActivity": None,
            "energyLevel": None,
            "tags": ["غضب"],
            "sessionDuration": 15,
            "curriculumQuery": None,
            "analysisType": "behavior",
            "messagesForModel": [{"role": "user", "content": "hi"}],
        }
        assert response.status_code == 200
        assert response.payload == [{"output": '{"summary": "ok"}'}]

    @pytest.mark.asyncio
    async def test_non_json_body_kept_as_text(self) -> None:
        transport = httpx.MockTransport(lambda r: httpx.Response(200, text="Workflow was started"))
        client = N8NWorkflowClient(WEBHOOK_URL, transport=transport)

        response = await client.run(make_request())

        assert response.payload == "Workflow was started"
        assert response.raw_text == "Workflow was started"

    @pytest.mark.asyncio
    async def test_error_status_still_returned(self) -> None:
        transport = httpx.MockTransport(
            lambda r: httpx.Response(500, json={"message": "Error in workflow"})
        )
        client = N8NWorkflowClient(WEBHOOK_URL, transport=transport)

        response = await client.run(make_request())

        assert response.status_code == 500
        assert response.payload == {"message": "Error in workflow"}

    @pytest.mark.asyncio
    async def test_missing_url(self) -> None:
        client = N8NWorkflowClient(None)

        with pytest.raises(WorkflowNotConfiguredError, match="N8N_WEBHOOK_URL not configured"):
            await client.run(make_request())

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = N8NWorkflowClient(WEBHOOK_URL, timeout_s=0.5, transport=httpx.MockTransport(handler))

        with pytest.raises(WorkflowTimeoutError) as exc_info:
            await client.run(make_request())

        assert exc_info.value.timeout_s == 0.5
        assert exc_info.value.workflow == "n8n"

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = N8NWorkflowClient(WEBHOOK_URL, transport=httpx.MockTransport(handler))

        with pytest.raises(WorkflowError, match="connection refused"):
            await client.run(make_request())
