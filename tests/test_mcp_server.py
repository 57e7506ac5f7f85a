"""
Tests for the FastMCP wiring, using fastmcp's in-memory Client.
"""

import json
import logging

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from core.autorag import AutoRagClient
from core.gateway import ToolGateway
from core.models import search_request_schema
from tests.conftest import SEARCH_PAYLOAD, FakeAutoRag
from tools import mcp_server
from tools.mcp_server import SERVER_NAME, _log_level, _log_response, build_server


@pytest.fixture
def server(config, gateway):
    return build_server(config, gateway)


class TestListTools:

    async def test_advertises_autorag_search(self, server):
        async with Client(server) as client:
            tools = await client.list_tools()
        assert [t.name for t in tools] == ["autorag_search"]
        assert tools[0].description.startswith("Search the configured Cloudflare AutoRAG")

    async def test_input_schema_comes_from_validator(self, server):
        async with Client(server) as client:
            tools = await client.list_tools()
        schema = tools[0].inputSchema
        expected = search_request_schema()
        assert set(schema["properties"]) == set(expected["properties"])
        assert schema["properties"]["max_num_results"]["minimum"] == 1
        assert schema["properties"]["max_num_results"]["maximum"] == 20
        assert schema["required"] == ["query"]

    def test_server_name(self, server):
        assert server.name == SERVER_NAME


class TestCallTool:

    async def test_success_returns_one_text_item(self, server, autorag):
        async with Client(server) as client:
            result = await client.call_tool("autorag_search", {"query": "how do I rotate a token"})
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        assert json.loads(result.content[0].text) == SEARCH_PAYLOAD
        assert len(autorag.requests) == 1

    async def test_remote_failure_is_an_error_result(self, config):
        fake = FakeAutoRag(status_code=500, text="boom")
        server = build_server(config, ToolGateway(AutoRagClient(config, transport=fake.transport)))
        async with Client(server) as client:
            with pytest.raises(ToolError, match="boom"):
                await client.call_tool("autorag_search", {"query": "q"})

    async def test_whole_float_accepted(self, server, autorag):
        async with Client(server) as client:
            await client.call_tool("autorag_search", {"query": "q", "max_num_results": 5.0})
        assert autorag.payloads[0]["max_num_results"] == 5

    async def test_invalid_arguments_send_nothing(self, server, autorag):
        async with Client(server) as client:
            with pytest.raises(ToolError):
                await client.call_tool("autorag_search", {"query": "q", "max_num_results": 21})
        assert autorag.requests == []

    async def test_keeps_serving_after_an_error(self, server, autorag):
        async with Client(server) as client:
            with pytest.raises(ToolError):
                await client.call_tool("autorag_search", {"max_num_results": 3})
            result = await client.call_tool("autorag_search", {"query": "again"})
        assert json.loads(result.content[0].text)["success"] is True
        assert len(autorag.requests) == 1

    async def test_unknown_tool(self, server, autorag):
        async with Client(server) as client:
            with pytest.raises(ToolError):
                await client.call_tool("web_search", {"query": "q"})
        assert autorag.requests == []


class TestMain:

    def test_missing_config_exits_non_zero(self, monkeypatch):
        for key in ("CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ACCOUNT_ID", "CLOUDFLARE_AUTORAG_ID"):
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setattr(mcp_server, "load_dotenv", lambda: None)
        with pytest.raises(SystemExit) as excinfo:
            mcp_server.main()
        assert excinfo.value.code == 1

    def test_startup_failure_exits_non_zero(self, monkeypatch):
        monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "t")
        monkeypatch.setenv("CLOUDFLARE_ACCOUNT_ID", "a")
        monkeypatch.setenv("CLOUDFLARE_AUTORAG_ID", "r")
        monkeypatch.setattr(mcp_server, "load_dotenv", lambda: None)

        def broken(config):
            raise RuntimeError("cannot bind stdio")

        monkeypatch.setattr(mcp_server, "build_server", broken)
        with pytest.raises(SystemExit) as excinfo:
            mcp_server.main()
        assert excinfo.value.code == 1


class TestLogging:

    @pytest.mark.parametrize("name, expected", [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        (" error ", logging.ERROR),
        ("verbose", logging.INFO),
        ("", logging.INFO),
    ])
    def test_log_level(self, name, expected):
        assert _log_level(name) == expected

    def test_response_summary_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="autorag_mcp"):
            returned = _log_response("autorag_search", {"content": [{"type": "text", "text": "abc"}]})
        assert returned is None
        assert "autorag_search response: 3 chars" in caplog.text
