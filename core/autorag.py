# =============================================================================
# core/autorag.py  --  Cloudflare AutoRAG search client
# =============================================================================
#
# The ONLY place that talks to the network.  Its contract is deliberately
# narrow:
#
#     await client.search(SearchRequest)  ->  SearchResponse
#                                         or  RemoteAPIError
#                                         or  ResponseShapeInvalid
#
# so the gateway can be tested against a fake with the same method.
#
# ONE REQUEST, ONE ATTEMPT:
#   No retries, no backoff.  If the host wants a retry policy it owns it.
#   The request is bounded by ServiceConfig.request_timeout so a stalled
#   connection cannot hang a tool call forever.
# =============================================================================

import logging
from typing import Any, Optional, Protocol

import httpx

from core.config import ServiceConfig
from core.errors import RemoteAPIError, ResponseShapeInvalid
from core.models import SearchRequest, SearchResponse, validate_search_response

logger = logging.getLogger(__name__)


class SearchClient(Protocol):
    async def search(self, request: SearchRequest) -> SearchResponse: ...


class AutoRagClient:
    """Calls ``POST {api}/accounts/{account}/autorag/rags/{rag}/search``.

    ``transport`` is passed straight to httpx; tests use httpx.MockTransport.
    """

    def __init__(self, config: ServiceConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def build_payload(self, request: SearchRequest) -> dict[str, Any]:
        """Supplied fields win; anything omitted falls back to the configured default."""
        payload = {"query": request.query}
        payload.update(self.config.search_defaults())
        payload.update(request.supplied_fields())
        return payload

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_token}",
            "Content-Type": "application/json",
        }

    async def search(self, request: SearchRequest) -> SearchResponse:
        payload = self.build_payload(request)
        logger.debug("POST %s %s", self.config.search_url, payload)

        async with httpx.AsyncClient(
            timeout=self.config.request_timeout,
            transport=self.transport,
        ) as http:
            try:
                response = await http.post(
                    self.config.search_url,
                    headers=self._headers(),
                    json=payload,
                )
            except httpx.TransportError as e:
                raise RemoteAPIError(0, f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise RemoteAPIError(response.status_code, response.reason_phrase, response.text)

        outcome = validate_search_response(response.content)
        if not outcome.ok:
            raise ResponseShapeInvalid(outcome.violations, body=response.text)

        logger.debug("AutoRAG returned %d result(s)", len(outcome.value.result.items))
        return outcome.value
