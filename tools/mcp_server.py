# =============================================================================
# tools/mcp_server.py  --  FastMCP Tool Server (stdio)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Puts the ToolGateway from core/ on the wire.  The host (an MCP client
#   such as the ADK agent in agent/) starts this process, lists its tools,
#   and calls autorag_search.
#
# HOW IT WORKS (the flow):
#   1. main() loads .env, builds ServiceConfig (exit 1 if it can't)
#   2. build_server() registers ONE GatewayTool per gateway descriptor
#   3. FastMCP routes "tools/call" to GatewayTool.run()
#   4. run() hands the raw argument bag to the gateway, which validates it,
#      calls Cloudflare, validates the answer and returns a text result
#   5. Any GatewayError becomes a ToolError: the host gets an error result,
#      the server keeps serving
#
# WHY NOT @mcp.tool()?
#   A decorated function gets its schema from its Python signature and its
#   arguments validated by FastMCP.  We want the schema AND the validation
#   to come from core.models.SearchRequest, so the tool is a Tool subclass
#   whose parameters are the gateway's descriptor schema.
#
# RUNNING THIS SERVER:
#     python -m tools.mcp_server
#     mcp-cloudflare-autorag        (console script, after pip install)
# =============================================================================

import logging
import os
import sys
from typing import Any, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from core.autorag import AutoRagClient
from core.config import ServiceConfig, load_config
from core.errors import ConfigError, GatewayError
from core.gateway import ToolDescriptor, ToolGateway

SERVER_NAME = "mcp-cloudflare-autorag"
SERVER_VERSION = "1.0.0"

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP JSON-RPC stream, so every log line goes to STDERR.
# Anything printed to stdout would corrupt the protocol.
#
#   CYAN   -> incoming tool calls
#   YELLOW -> intermediate status
#   GREEN  -> successful responses
#   RED    -> errors returned to the host
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"


def _log_level(name: str) -> int:
    """Map a LOG_LEVEL name to a logging level; unknown names mean INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(
    level=_log_level(os.environ.get("LOG_LEVEL", "INFO")),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("autorag_mcp")


def _log_request(tool_name: str, arguments: Any) -> None:
    """Log an incoming tool call with its arguments in CYAN."""
    if isinstance(arguments, dict):
        param_str = ", ".join(f"{k}={v!r}" for k, v in arguments.items())
    else:
        param_str = repr(arguments)
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_error(tool_name: str, error: Exception) -> None:
    logger.warning(f"{_RED}  ✗ {tool_name} failed: {error}{_RESET}")


def _log_response(tool_name: str, result: dict) -> None:
    """Log a one-line summary of the result in GREEN."""
    size = sum(len(item.get("text", "")) for item in result.get("content", []))
    logger.info(f"{_GREEN}  ← {tool_name} response: {size} chars{_RESET}")


# =============================================================================
# GatewayTool -- one FastMCP tool backed by the ToolGateway
# =============================================================================
class GatewayTool(Tool):
    """A FastMCP tool that forwards the raw argument bag to the gateway."""

    _gateway: ToolGateway = PrivateAttr()

    @classmethod
    def from_descriptor(cls, gateway: ToolGateway, descriptor: ToolDescriptor) -> "GatewayTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.input_schema,
        )
        tool._gateway = gateway
        return tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        _log_request(self.name, arguments)
        try:
            result = await self._gateway.call_tool(self.name, arguments)
        except GatewayError as e:
            _log_error(self.name, e)
            raise ToolError(str(e)) from e

        _log_response(self.name, result)
        return ToolResult(
            content=[TextContent(type="text", text=item["text"]) for item in result["content"]]
        )


# =============================================================================
# Server construction
# =============================================================================
def build_server(config: ServiceConfig, gateway: Optional[ToolGateway] = None) -> FastMCP:
    """Create the FastMCP server.  Pass ``gateway`` to substitute the client."""
    if gateway is None:
        gateway = ToolGateway(AutoRagClient(config))

    mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)
    for descriptor in gateway.list_tools():
        mcp.add_tool(GatewayTool.from_descriptor(gateway, descriptor))
        _log_status(f"Registered tool {descriptor.name}")
    return mcp


def main() -> None:
    """Entry point: fail fast on bad configuration, then serve stdio until EOF."""
    load_dotenv()

    try:
        config = load_config(os.environ)
    except ConfigError as e:
        for problem in e.problems:
            logger.error(problem)
        logger.error("Refusing to start: fix the environment and try again.")
        sys.exit(1)

    try:
        server = build_server(config)
        logger.info("Cloudflare AutoRAG MCP Server Running on stdio")
        server.run(transport="stdio")
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
