# =============================================================================
# tools/__init__.py
# =============================================================================
# The FastMCP layer.  It translates MCP list/call requests into ToolGateway
# calls and GatewayErrors into MCP error results.  All validation and HTTP
# logic stays in core/.
# =============================================================================
