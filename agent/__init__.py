# =============================================================================
# agent/__init__.py
# =============================================================================
# A Google ADK agent that acts as an MCP HOST for the AutoRAG tool server.
#
# The tool server (tools/mcp_server.py) is usable from any MCP host.  This
# package is a ready-made one: it spawns the server over stdio, lets an LLM
# decide when to call autorag_search, and answers questions grounded in the
# indexed documents.
#
# Nothing in core/ depends on this package.
# =============================================================================

from agent.autorag_agent import create_agent

__all__ = ["create_agent"]
