# =============================================================================
# agent/autorag_agent.py  --  Google ADK agent wired to the AutoRAG MCP server
# =============================================================================
#
#   ┌─────────────────────────────┐   stdio    ┌──────────────────────────┐
#   │  ADK Agent (LiteLlm model)  │──────────▶│  tools/mcp_server.py     │
#   │  + MCPToolset               │◀──────────│  autorag_search          │
#   └─────────────────────────────┘            └──────────────────────────┘
#                                                          │ HTTPS
#                                                          ▼
#                                              Cloudflare AutoRAG search API
#
# SUBPROCESS ENVIRONMENT:
#   The MCP stdio client only forwards a small allow-list of variables
#   (PATH, HOME, ...) to the server it spawns.  The Cloudflare credentials
#   and search defaults have to be passed explicitly, see server_env().
# =============================================================================

import os
import sys
from typing import Mapping, Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_research_assistant_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"

FORWARDED_VARIABLES = (
    "CLOUDFLARE_API_TOKEN",
    "CLOUDFLARE_ACCOUNT_ID",
    "CLOUDFLARE_AUTORAG_ID",
    "CLOUDFLARE_API_URL",
    "REWRITE_QUERY",
    "MAX_NUM_RESULTS",
    "SCORE_THRESHOLD",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "PATH",
    "HOME",
)


def server_env(environ: Mapping[str, str]) -> dict[str, str]:
    """Pick the variables the tool server subprocess needs."""
    return {key: environ[key] for key in FORWARDED_VARIABLES if key in environ}


def server_parameters(environ: Optional[Mapping[str, str]] = None) -> StdioServerParameters:
    """How to launch the tool server: ``python -m tools.mcp_server`` from the project root."""
    if environ is None:
        environ = os.environ
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return StdioServerParameters(
        command=sys.executable,
        args=["-m", "tools.mcp_server"],
        cwd=project_root,
        env=server_env(environ),
    )


def create_agent(model: Optional[str] = None) -> Agent:
    """Create the research assistant agent.

    ``model`` is any LiteLlm model string; it defaults to $AGENT_MODEL, then
    to GPT-4o through OpenRouter (LiteLlm reads OPENROUTER_API_KEY itself).
    """
    mcp_tools = MCPToolset(connection_params=server_parameters())

    return Agent(
        name="autorag_research_assistant",
        model=LiteLlm(model=model or os.environ.get("AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_research_assistant_prompt(),
        tools=[mcp_tools],
    )
