# =============================================================================
# core/__init__.py
# =============================================================================
# Framework-free logic for the Cloudflare AutoRAG tool server:
#
#   config.py   -> ServiceConfig, loaded once from the environment
#   models.py   -> request/response schemas and validation outcomes
#   errors.py   -> ConfigError and the per-call GatewayError taxonomy
#   autorag.py  -> the single outbound HTTP call (httpx)
#   gateway.py  -> tool discovery and invocation
#
# Nothing in this package imports FastMCP or Google ADK.
# =============================================================================
