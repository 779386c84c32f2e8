"""
CodeShelf Client — HTTP API Wrapper
=====================================

What:  Async client for the /api/snippets surface.
How:   Wraps an httpx.AsyncClient; parses responses into SnippetResponse and
       maps error statuses onto the shared exception taxonomy:

           400 → ValidationError (with `missing` when the server sent it)
           404 → NotFoundError
           429 → RateLimitExceededError
           5xx → StoreError
           transport failure → APIConnectionError
           unreadable 2xx body → StoreError("Malformed server response")

Compatibility:
    The list endpoint may answer with a bare array or with
    {"snippets": [...], "count": n}; create may answer with a bare snippet or
    {"snippet": {...}}. Both shapes are accepted.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import ValidationError as SchemaError

from codeshelf.exceptions import (
    APIConnectionError,
    CodeShelfError,
    NotFoundError,
    RateLimitExceededError,
    StoreError,
    ValidationError,
)
from codeshelf.schemas.snippet import SnippetResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)

MALFORMED_RESPONSE = "Malformed server response"


class SnippetAPI:
    """
    Thin async wrapper over the snippet endpoints.

    Usage:
        async with SnippetAPI("http://localhost:5000") as api:
            snippets = await api.list_snippets(search="sort")

    Pass `client=` to reuse an existing httpx.AsyncClient (its base_url must
    point at the server); such a client is not closed by this wrapper.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        client: Optional[httpx.AsyncClient] = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "SnippetAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── Endpoints ─────────────────────────────────────────────────────────

    async def list_snippets(
        self,
        search: Optional[str] = None,
        language: Optional[str] = None,
    ) -> List[SnippetResponse]:
        params = {k: v for k, v in (("search", search), ("language", language)) if v}
        data = await self._request("GET", "/api/snippets", params=params)
        try:
            items = data["snippets"] if isinstance(data, dict) else data
            return [SnippetResponse.model_validate(item) for item in items]
        except (KeyError, TypeError, SchemaError) as e:
            raise self._malformed("GET", "/api/snippets", e) from e

    async def get_snippet(self, snippet_id: str) -> SnippetResponse:
        url = f"/api/snippets/{snippet_id}"
        return self._parse_snippet("GET", url, await self._request("GET", url))

    async def create_snippet(self, fields: Mapping[str, Any]) -> SnippetResponse:
        data = await self._request("POST", "/api/snippets", json=dict(fields))
        if isinstance(data, dict) and "snippet" in data:
            data = data["snippet"]
        return self._parse_snippet("POST", "/api/snippets", data)

    async def update_snippet(self, snippet_id: str, fields: Mapping[str, Any]) -> SnippetResponse:
        url = f"/api/snippets/{snippet_id}"
        data = await self._request("PUT", url, json=dict(fields))
        return self._parse_snippet("PUT", url, data)

    async def delete_snippet(self, snippet_id: str) -> str:
        data = await self._request("DELETE", f"/api/snippets/{snippet_id}")
        return data.get("message", "") if isinstance(data, dict) else ""

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/health")

    # ── Internals ─────────────────────────────────────────────────────────

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, str(e))
            raise APIConnectionError(context={"method": method, "url": url}) from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                # Non-JSON 2xx, e.g. an HTML page from a proxy in front of the API
                raise self._malformed(method, url, e) from e

        raise self._error_from_response(response)

    def _parse_snippet(self, method: str, url: str, data: Any) -> SnippetResponse:
        try:
            return SnippetResponse.model_validate(data)
        except SchemaError as e:
            raise self._malformed(method, url, e) from e

    @staticmethod
    def _malformed(method: str, url: str, exc: Exception) -> StoreError:
        logger.warning("%s %s returned an unreadable body: %s", method, url, str(exc))
        return StoreError(
            message=MALFORMED_RESPONSE,
            context={"method": method, "url": url, "error_type": type(exc).__name__},
        )

    @staticmethod
    def _error_from_response(response: httpx.Response) -> CodeShelfError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or response.reason_phrase or "Request failed"
        status = response.status_code

        if status == 400:
            return ValidationError(
                message=message,
                missing=body.get("missing"),
                context=body.get("details") or {},
            )
        if status == 404:
            return NotFoundError(message=message)
        if status == 429:
            return RateLimitExceededError(
                retry_after=int(response.headers.get("Retry-After", "60"))
            )
        if status >= 500:
            return StoreError(message=message, context={"status": status})
        return CodeShelfError(message=message, context={"status": status})
