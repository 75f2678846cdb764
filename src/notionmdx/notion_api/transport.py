"""Async HTTP transport for the Notion API.

Request lifecycle:

1. Send the request with auth and version headers.
2. On ``2xx`` -- return the parsed JSON body.
3. On ``429`` / ``5xx`` / network error -- back off and retry while the
   attempt budget lasts.
4. On any other ``4xx`` -- raise the matching typed error immediately.
5. On an exhausted budget -- raise :class:`NotionMDXRateLimitError`,
   :class:`NotionMDXNetworkError` or :class:`NotionMDXAPIError`.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx

from notionmdx.config import NotionMDXConfig
from notionmdx.errors import (
    NotionMDXAPIError,
    NotionMDXAuthError,
    NotionMDXNetworkError,
    NotionMDXNotFoundError,
    NotionMDXPermissionError,
    NotionMDXRateLimitError,
)
from notionmdx.observability import NoopMetricsHook, get_logger

from .retries import RETRYABLE_EXCEPTIONS, compute_backoff, should_retry

log = get_logger("notionmdx.transport")

PAGE_SIZE = 100


def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a non-retryable error response."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}

    notion_message = body.get("message", response.text[:500])
    context = {
        "status_code": status,
        "notion_code": body.get("code", ""),
        "path": path,
    }

    if status == 401:
        raise NotionMDXAuthError(
            message=f"Authentication failed on {method} {path}: {notion_message}",
            context=context,
        )
    if status == 403:
        raise NotionMDXPermissionError(
            message=f"Permission denied on {method} {path}: {notion_message}",
            context=context,
        )
    if status == 404:
        raise NotionMDXNotFoundError(
            message=f"Resource not found on {method} {path}: {notion_message}",
            context=context,
        )
    raise NotionMDXAPIError(
        message=f"Notion API error {status} on {method} {path}: {notion_message}",
        context=context,
    )


class AsyncNotionTransport:
    """Retrying ``httpx.AsyncClient`` wrapper.

    Parameters
    ----------
    config:
        Connection and retry options.
    http_transport:
        Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: NotionMDXConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
            transport=http_transport,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send one API request, retrying transient failures.

        Returns
        -------
        dict
            The decoded JSON body (``{}`` for empty responses).
        """
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None
        last_exception: Exception | None = None

        for attempt in range(max_attempts):
            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except RETRYABLE_EXCEPTIONS as exc:
                last_exception, last_status = exc, None
                self._metrics.increment(
                    "notionmdx.requests_total",
                    tags={"method": method, "status": "error"},
                )
                log.warning(
                    "Request network error",
                    extra={
                        "extra_fields": {
                            "method": method,
                            "path": path,
                            "attempt": attempt + 1,
                            "error": str(exc),
                        }
                    },
                )
                if not should_retry(None, exc, attempt, max_attempts):
                    break
                await self._backoff(attempt, "network_error")
                continue

            last_status, last_exception = response.status_code, None
            self._metrics.increment(
                "notionmdx.requests_total",
                tags={"method": method, "status": str(response.status_code)},
            )
            self._metrics.timing(
                "notionmdx.request_duration_ms",
                (time.monotonic() - t0) * 1000,
                tags={"method": method},
            )

            if 200 <= response.status_code < 300:
                if response.status_code == 204 or not response.content:
                    return {}
                result: dict = response.json()
                return result

            if not should_retry(response.status_code, None, attempt, max_attempts):
                if response.status_code in (429, 500, 502, 503, 504):
                    break
                _raise_for_status(response, method, path)

            retry_after = None
            reason = "server_error"
            if response.status_code == 429:
                retry_after = _parse_retry_after(response)
                reason = "rate_limited"
                log.warning(
                    "Rate limited by Notion API",
                    extra={
                        "extra_fields": {
                            "method": method,
                            "path": path,
                            "retry_after": retry_after,
                            "attempt": attempt + 1,
                        }
                    },
                )
            await self._backoff(attempt, reason, retry_after)

        context: dict[str, Any] = {
            "attempts": max_attempts,
            "path": path,
            "status_code": last_status,
        }
        if last_exception is not None:
            raise NotionMDXNetworkError(
                message=f"Network error on {method} {path} after {max_attempts} attempts: {last_exception}",
                context=context,
                cause=last_exception,
            ) from last_exception
        if last_status == 429:
            raise NotionMDXRateLimitError(
                message=f"Rate limited on {method} {path} after {max_attempts} attempts",
                context=context,
            )
        raise NotionMDXAPIError(
            message=f"Notion API error {last_status} on {method} {path} after {max_attempts} attempts",
            context=context,
        )

    async def _backoff(
        self, attempt: int, reason: str, retry_after: float | None = None
    ) -> None:
        self._metrics.increment("notionmdx.retries_total", tags={"reason": reason})
        await asyncio.sleep(
            compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
                retry_after=retry_after,
            )
        )

    async def paginate(self, path: str, **kwargs: Any) -> AsyncIterator[dict]:
        """Yield every ``results`` item of a paginated ``GET`` endpoint."""
        params: dict[str, Any] = dict(kwargs.pop("params", None) or {})
        params["page_size"] = PAGE_SIZE
        cursor: str | None = None

        while True:
            if cursor is not None:
                params["start_cursor"] = cursor
            data = await self.request("GET", path, params=dict(params), **kwargs)
            for item in data.get("results", []):
                yield item

            cursor = data.get("next_cursor")
            if not data.get("has_more", False) or cursor is None:
                break

    async def close(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
