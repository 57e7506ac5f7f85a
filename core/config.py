# =============================================================================
# core/config.py  --  ServiceConfig (loaded once, read-only afterwards)
# =============================================================================
#
# The server has no useful behavior without Cloudflare credentials, so the
# loader is fail-fast: it checks every key, collects every problem, and
# raises ONE ConfigError naming all of them.  tools/mcp_server.py turns that
# into a non-zero exit before any MCP traffic happens.
#
# The loader takes a plain mapping (usually os.environ) so tests can hand it
# a dict instead of patching the process environment.
#
# ENVIRONMENT:
#   Required:  CLOUDFLARE_API_TOKEN, CLOUDFLARE_ACCOUNT_ID, CLOUDFLARE_AUTORAG_ID
#   Search defaults (used when the caller omits a field):
#              REWRITE_QUERY    "true" -> True, anything else -> False
#              MAX_NUM_RESULTS  integer 1-20, default 10
#              SCORE_THRESHOLD  number 0-1, default 0
#   Transport: CLOUDFLARE_API_URL, REQUEST_TIMEOUT (seconds, default 30)
# =============================================================================

import math
from dataclasses import dataclass
from typing import Any, Mapping

from core.errors import ConfigError

DEFAULT_API_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_MAX_NUM_RESULTS = 10
DEFAULT_SCORE_THRESHOLD = 0.0
DEFAULT_REQUEST_TIMEOUT = 30.0

REQUIRED_KEYS = ("CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ACCOUNT_ID", "CLOUDFLARE_AUTORAG_ID")


@dataclass(frozen=True)
class ServiceConfig:
    """Everything the gateway needs to reach one AutoRAG index."""

    api_token: str
    account_id: str
    autorag_id: str

    # --- Search defaults, merged into requests that omit them ---
    rewrite_query: bool = False
    max_num_results: int = DEFAULT_MAX_NUM_RESULTS
    score_threshold: float = DEFAULT_SCORE_THRESHOLD

    # --- Transport ---
    api_url: str = DEFAULT_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def search_url(self) -> str:
        return (
            f"{self.api_url}/accounts/{self.account_id}"
            f"/autorag/rags/{self.autorag_id}/search"
        )

    def search_defaults(self) -> dict[str, Any]:
        return {
            "rewrite_query": self.rewrite_query,
            "max_num_results": self.max_num_results,
            "score_threshold": self.score_threshold,
        }

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks.
        return (
            f"ServiceConfig(account_id={self.account_id!r}, "
            f"autorag_id={self.autorag_id!r}, api_token='***')"
        )


def _get(environ: Mapping[str, str], key: str) -> str:
    return (environ.get(key) or "").strip()


def load_config(environ: Mapping[str, str]) -> ServiceConfig:
    """Build a ServiceConfig from environment-style settings.

    Raises:
        ConfigError: listing every missing or malformed key.
    """
    problems: list[str] = []

    required = {key: _get(environ, key) for key in REQUIRED_KEYS}
    for key, value in required.items():
        if not value:
            problems.append(f"{key} is required")

    rewrite_query = _get(environ, "REWRITE_QUERY").lower() == "true"

    max_num_results = DEFAULT_MAX_NUM_RESULTS
    raw = _get(environ, "MAX_NUM_RESULTS")
    if raw:
        try:
            max_num_results = int(raw)
        except ValueError:
            problems.append(f"MAX_NUM_RESULTS must be an integer, got {raw!r}")
        else:
            if not 1 <= max_num_results <= 20:
                problems.append(f"MAX_NUM_RESULTS must be between 1 and 20, got {max_num_results}")

    score_threshold = DEFAULT_SCORE_THRESHOLD
    raw = _get(environ, "SCORE_THRESHOLD")
    if raw:
        try:
            score_threshold = float(raw)
        except ValueError:
            problems.append(f"SCORE_THRESHOLD must be a number, got {raw!r}")
        else:
            if not (math.isfinite(score_threshold) and 0 <= score_threshold <= 1):
                problems.append(f"SCORE_THRESHOLD must be between 0 and 1, got {raw}")

    request_timeout = DEFAULT_REQUEST_TIMEOUT
    raw = _get(environ, "REQUEST_TIMEOUT")
    if raw:
        try:
            request_timeout = float(raw)
        except ValueError:
            problems.append(f"REQUEST_TIMEOUT must be a number of seconds, got {raw!r}")
        else:
            if not (math.isfinite(request_timeout) and request_timeout > 0):
                problems.append(f"REQUEST_TIMEOUT must be positive, got {raw}")

    api_url = (_get(environ, "CLOUDFLARE_API_URL") or DEFAULT_API_URL).rstrip("/")

    if problems:
        raise ConfigError(problems)

    return ServiceConfig(
        api_token=required["CLOUDFLARE_API_TOKEN"],
        account_id=required["CLOUDFLARE_ACCOUNT_ID"],
        autorag_id=required["CLOUDFLARE_AUTORAG_ID"],
        rewrite_query=rewrite_query,
        max_num_results=max_num_results,
        score_threshold=score_threshold,
        api_url=api_url,
        request_timeout=request_timeout,
    )
