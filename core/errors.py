# =============================================================================
# core/errors.py  --  Error Taxonomy
# =============================================================================
#
# Two families of errors live here:
#
#   ConfigError   -> raised once, at startup, when the environment cannot
#                    produce a ServiceConfig.  The server refuses to start.
#
#   GatewayError  -> raised per tool call.  The MCP layer turns every one of
#                    these into an error result for the host and keeps
#                    serving the next request.
#
# Every GatewayError carries structured data (not just a message) so callers
# and tests can inspect exactly what went wrong.
# =============================================================================

from typing import Optional

from core.models import Violation


class ConfigError(Exception):
    """The environment is missing required settings or holds malformed ones.

    ``problems`` lists one human-readable entry per offending key.
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


class GatewayError(Exception):
    """Base class for every failure of a single tool invocation."""


class MissingArguments(GatewayError):
    def __init__(self):
        super().__init__("Arguments are required")


class UnknownTool(GatewayError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ArgumentValidationFailed(GatewayError):
    """The argument bag did not parse into a SearchRequest.

    All violations found are reported together, in field order.
    """

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        details = ", ".join(str(v) for v in self.violations)
        super().__init__(f"Invalid arguments: {details}")


class RemoteAPIError(GatewayError):
    """The AutoRAG endpoint answered with a non-success status.

    A transport failure (no response at all) uses ``status_code`` 0 and puts
    the transport error text in ``status_text``.
    """

    def __init__(self, status_code: int, status_text: str, body: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(f"Cloudflare API error: {status_text} - {body}")


class ResponseShapeInvalid(GatewayError):
    """The AutoRAG endpoint returned a payload we do not understand."""

    def __init__(self, violations: list[Violation], body: Optional[str] = None):
        self.violations = list(violations)
        self.body = body
        details = ", ".join(str(v) for v in self.violations)
        super().__init__(f"Unexpected response from Cloudflare API: {details}")
