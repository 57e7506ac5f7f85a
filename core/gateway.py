# =============================================================================
# core/gateway.py  --  The Tool Gateway
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Owns the one tool this server offers.  It answers the two questions the
#   MCP host can ask:
#
#     list_tools()            -> [ToolDescriptor]       (discovery)
#     call_tool(name, args)   -> {"content": [...]}     (invocation)
#
# HOW A CALL FLOWS:
#   1. No arguments at all          -> MissingArguments
#   2. Name is not autorag_search   -> UnknownTool
#   3. Arguments fail validation    -> ArgumentValidationFailed (all fields)
#   4. client.search(request)       -> RemoteAPIError / ResponseShapeInvalid
#   5. Success                      -> one text item holding the JSON response
#
#   Steps 1-3 never touch the network.
#
# FRAMEWORK-FREE:
#   Nothing here imports FastMCP.  tools/mcp_server.py adapts this class to
#   the protocol; tests drive it directly with a fake SearchClient.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.autorag import SearchClient
from core.errors import ArgumentValidationFailed, MissingArguments, UnknownTool
from core.models import SearchResponse, search_request_schema, validate_search_request

logger = logging.getLogger(__name__)

TOOL_NAME = "autorag_search"
TOOL_DESCRIPTION = "Search the configured Cloudflare AutoRAG instance for relevant information."


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def text_result(response: SearchResponse) -> dict[str, Any]:
    """Wrap a validated response in the MCP tool-result envelope."""
    return {"content": [{"type": "text", "text": response.to_json()}]}


class ToolGateway:
    """Validates tool calls and relays them to the AutoRAG client.

    Holds no per-call state; concurrent calls only share the read-only
    client configuration.
    """

    def __init__(self, client: SearchClient):
        self.client = client

    def list_tools(self) -> list[ToolDescriptor]:
        return [
            ToolDescriptor(
                name=TOOL_NAME,
                description=TOOL_DESCRIPTION,
                input_schema=search_request_schema(),
            )
        ]

    async def search(self, name: str, arguments: Optional[Mapping[str, Any]]) -> SearchResponse:
        """Run steps 1-4 and return the validated response itself."""
        if arguments is None:
            raise MissingArguments()
        if name != TOOL_NAME:
            raise UnknownTool(name)

        outcome = validate_search_request(arguments)
        if not outcome.ok:
            raise ArgumentValidationFailed(outcome.violations)

        logger.debug("%s arguments accepted: %s", name, outcome.value.supplied_fields())
        return await self.client.search(outcome.value)

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        response = await self.search(name, arguments)
        return text_result(response)
