# src/client/figma_client.py — v2
"""Figma REST API client built on httpx.AsyncClient.

Endpoints:
    GET /v1/teams/{team_id}/projects
    GET /v1/projects/{project_id}/files
    GET /v1/files/{file_key}?depth=&ids=

HTTP 500 is reported as TooLarge: Figma answers 500 when it cannot render
a file response within its size limits.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from figmadump.client.base_client import BaseFigmaClient
from figmadump.client.models import FetchOk, FetchResult, OtherFailure, TooLarge
from figmadump.client.retry import RetryConfig, send_with_retry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.figma.com"
TOO_LARGE_STATUS = 500
_ERROR_SNIPPET = 200


class FigmaClient(BaseFigmaClient):
    """Async Figma API client.

    Args:
        token: Personal access token (sent as X-Figma-Token).
        base_url: API root, overridable for proxies and tests.
        timeout_s: httpx timeout for every request.
        retry_config: 429 backoff policy.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 60.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._retry = retry_config or RetryConfig()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"X-Figma-Token": token, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
        )
        self.request_count = 0

    async def list_projects(self, team_id: str) -> FetchResult:
        return await self._get(f"/v1/teams/{quote(str(team_id), safe='')}/projects")

    async def list_files(self, project_id: str) -> FetchResult:
        return await self._get(f"/v1/projects/{quote(str(project_id), safe='')}/files")

    async def get_document(
        self,
        file_key: str,
        depth: int | None = None,
        ids: Sequence[str] | None = None,
    ) -> FetchResult:
        params: dict[str, Any] = {}
        if depth is not None:
            params["depth"] = depth
        if ids:
            params["ids"] = ",".join(str(i) for i in ids)
        return await self._get(f"/v1/files/{quote(str(file_key), safe='')}", params)

    async def close(self) -> None:
        logger.debug("Closing Figma client after %d HTTP request(s)", self.request_count)
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> FetchResult:
        label = f"GET {path}"
        if params:
            label += f" {params}"

        async def send() -> httpx.Response:
            self.request_count += 1
            return await self._client.get(path, params=params or None)

        try:
            response = await send_with_retry(send, self._retry, label=label)
        except httpx.TimeoutException as e:
            return OtherFailure(f"timeout: {e!r}")
        except httpx.HTTPError as e:
            return OtherFailure(f"transport error: {e!r}")

        status = response.status_code
        if status == TOO_LARGE_STATUS:
            logger.info("%s -> 500, treating as too large", label)
            return TooLarge(_error_detail(response))
        if not response.is_success:
            return OtherFailure(_error_detail(response), status_code=status)

        try:
            body = response.json()
        except ValueError as e:
            return OtherFailure(f"invalid JSON body: {e}", status_code=status)
        if not isinstance(body, dict):
            return OtherFailure(
                f"expected JSON object, got {type(body).__name__}", status_code=status
            )
        logger.debug("%s -> %d", label, status)
        return FetchOk(body)


def _error_detail(response: httpx.Response) -> str:
    """Extract Figma's error message ({"status": ..., "err": ...}) if present."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:_ERROR_SNIPPET]
    if isinstance(body, dict):
        for key in ("err", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text[:_ERROR_SNIPPET]
