"""
Shared fixtures: a fake OpenAI endpoint served through httpx.MockTransport,
so no test reaches the network.
"""
import json
from typing import Any, List

import httpx
import pytest
from fastapi.testclient import TestClient

from aidgen.main import create_app
from aidgen.relay import Relay

API_KEY = "sk-test-key"


def completion_body(content: Any = "<table></table>") -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


class FakeUpstream:
    """Records every outbound request and answers with a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.json_body: Any = completion_body()
        self.text_body = None

    def reply(self, status_code=200, json_body=None, text=None):
        self.status_code = status_code
        self.json_body = json_body
        self.text_body = text

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def payloads(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def relay(http_client):
    return Relay(api_key=API_KEY, client=http_client)


@pytest.fixture
def audit_path(tmp_path):
    return str(tmp_path / "audit.jsonl")


@pytest.fixture
def client(http_client, audit_path):
    app = create_app(api_key=API_KEY, client=http_client, audit_log_path=audit_path)
    return TestClient(app)
