"""Shared fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from planwise.config import Settings
from planwise.workflow.base import WorkflowClient, WorkflowRequest, WorkflowResponse


class FakeWorkflow(WorkflowClient):
    """Workflow that answers with a canned response and records requests."""

    def __init__(self, payload: Any = None, raw_text: str | None = None, error: Exception | None = None):
        self.payload = payload
        self.raw_text = raw_text if raw_text is not None else json.dumps(payload, ensure_ascii=False)
        self.error = error
        self.requests: list[WorkflowRequest] = []

    @property
    def name(self) -> str:
        return "fake"

    async def run(self, request: WorkflowRequest) -> WorkflowResponse:
        self.requests.append(request)
        if self.error:
            raise self.error
        return WorkflowResponse(raw_text=self.raw_text, payload=self.payload)


@pytest.fixture
def curriculum_file(tmp_path: Path) -> Path:
    path = tmp_path / "curriculum.json"
    path.write_text(
        json.dumps(
            [
                {"title": "Colors", "content": "Match red and blue cards."},
                {"title": "Counting", "content": "Count blocks up to ten."},
                {"title": "Turn taking", "content": "Wait for a turn with a timer."},
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def settings(curriculum_file: Path) -> Settings:
    return Settings(
        n8n_webhook_url="http://n8n.test/webhook/analyze",
        curriculum_path=curriculum_file,
    )
