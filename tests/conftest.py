"""
Shared fixtures: a fixed ServiceConfig and a fake AutoRAG endpoint built on
httpx.MockTransport, so no test ever touches the network.
"""

import json
from typing import Any, Optional

import httpx
import pytest

from core.autorag import AutoRagClient
from core.config import ServiceConfig
from core.gateway import ToolGateway

SEARCH_PAYLOAD = {
    "success": True,
    "result": {
        "object": "vector_store.search_results.page",
        "search_query": "how do I rotate a token",
        "data": [
            {
                "file_id": "f-001",
                "filename": "tokens.md",
                "score": 0.82,
                "attributes": {"folder": "docs/", "timestamp": 1735689600},
                "content": [{"type": "text", "text": "Rotate tokens from the dashboard."}],
            }
        ],
        "has_more": False,
        "next_page": None,
    },
}


class FakeAutoRag:
    """Records every request and answers with a canned response."""

    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.body = SEARCH_PAYLOAD if body is None and text is None else body
        self.text = text
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(
        api_token="test-token",
        account_id="acct-123",
        autorag_id="docs-rag",
        api_url="https://api.example.test/client/v4",
    )


@pytest.fixture
def autorag() -> FakeAutoRag:
    return FakeAutoRag()


@pytest.fixture
def client(config, autorag) -> AutoRagClient:
    return AutoRagClient(config, transport=autorag.transport)


@pytest.fixture
def gateway(client) -> ToolGateway:
    return ToolGateway(client)
