from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app, get_orchestrator
from relay.clients import DialogEngineClient, TextAnalyzerClient
from relay.orchestrator import MessageOrchestrator


NLU_URL = "http://nlu.local/api"
CONVERSATION_URL = "http://conversation.local/api"


class FakeServices:
    """Records calls to both collaborators and answers with canned replies."""

    def __init__(self) -> None:
        self.analyze_calls: List[Dict[str, Any]] = []
        self.message_calls: List[Dict[str, Any]] = []
        self.analysis: Dict[str, Any] = {}
        self.analyze_status = 200
        self.dialog_output: Dict[str, Any] = {"text": "Hello"}
        self.dialog_status = 200
        self.dialog_error: Optional[Dict[str, Any]] = None

    def analyzer_handler(self, request: httpx.Request) -> httpx.Response:
        self.analyze_calls.append(json.loads(request.content))
        if self.analyze_status != 200:
            return httpx.Response(self.analyze_status, json={"error": "analyze failed"})
        return httpx.Response(200, json=self.analysis)

    def dialog_handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.message_calls.append(body)
        if self.dialog_status != 200:
            return httpx.Response(self.dialog_status, json=self.dialog_error)
        # echo the context back, the way a dialog engine round-trips it
        return httpx.Response(
            200,
            json={
                "output": dict(self.dialog_output),
                "context": body["context"],
                "intents": [],
            },
        )

    def orchestrator(
        self,
        workspace_id: Optional[str] = "ws-1",
        analyzer_handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> MessageOrchestrator:
        analyzer = TextAnalyzerClient(
            url=NLU_URL,
            version_date="2017-02-27",
            transport=httpx.MockTransport(analyzer_handler or self.analyzer_handler),
        )
        dialog = DialogEngineClient(
            url=CONVERSATION_URL,
            version_date="2017-02-03",
            transport=httpx.MockTransport(self.dialog_handler),
        )
        return MessageOrchestrator(analyzer, dialog, workspace_id=workspace_id)


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def client(services: FakeServices):
    app.dependency_overrides[get_orchestrator] = lambda: services.orchestrator()
    yield TestClient(app)
    app.dependency_overrides.clear()
