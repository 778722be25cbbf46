"""Unified async HTTP client with timeout, rate limiting, and optional retry.

Provides BaseHTTPClient used by the store platform clients.
"""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Mapping
from typing import Any

import aiohttp

from stock_inference.clients.ratelimit import AsyncTokenBucket
from stock_inference.core.logging import get_logger
from stock_inference.core.metrics import external_api_duration_seconds, external_api_requests_total

log = get_logger("stock_inference.http")

DEFAULT_TIMEOUT = 30
RETRY_STATUS = {429, 500, 502, 503, 504}


class BaseHTTPClient:
    """Base HTTP client with per-call timeout, rate limiting, and retry."""

    def __init__(
        self,
        base_url: str,
        default_headers: Mapping[str, str] | None = None,
        timeout_sec: float = DEFAULT_TIMEOUT,
        rate_limit_per_min: int | None = None,
        rate_capacity: int | None = None,
        max_retries: int = 1,
        backoff_base: float = 0.75,
        backoff_max: float = 8.0,
        service: str = "external",
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Base URL for all requests
            default_headers: Headers to include in all requests
            timeout_sec: Total timeout per request in seconds
            rate_limit_per_min: Max requests per minute (None to disable)
            rate_capacity: Token bucket capacity (defaults to rate_limit_per_min)
            max_retries: Attempts per request; 1 disables retry
            backoff_base: Base delay for exponential backoff
            backoff_max: Maximum backoff delay
            service: Label used for external API metrics

        """
        self.base_url = base_url.rstrip("/")
        self.default_headers = dict(default_headers or {})
        self.timeout_sec = timeout_sec
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self.service = service

        self._rate: AsyncTokenBucket | None = None
        if rate_limit_per_min:
            rate_per_sec = rate_limit_per_min / 60.0
            cap = rate_capacity or rate_limit_per_min
            self._rate = AsyncTokenBucket(rate_per_sec=rate_per_sec, capacity=cap)

        self._session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if not self._session or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_sec)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _backoff(self, attempt: int) -> float:
        delay = min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_max)
        return delay * (0.7 + 0.6 * (time.perf_counter() % 1))

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        endpoint: str | None = None,
    ) -> aiohttp.ClientResponse:
        """Make HTTP request with rate limiting and optional retry.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: URL path (relative to base_url)
            headers: Additional headers
            params: Query parameters
            json_body: JSON body for request
            endpoint: Path template used as the metrics label (defaults to path)

        Returns:
            aiohttp.ClientResponse with the body already read

        Raises:
            aiohttp.ClientError: If the last attempt fails at transport level
            asyncio.TimeoutError: If the last attempt times out

        """
        url = f"{self.base_url}{path}"
        label = endpoint or path
        hdrs = dict(self.default_headers)
        if headers:
            hdrs.update(headers)

        session = await self._ensure_session()
        attempt = 0

        while True:
            attempt += 1
            if self._rate:
                await self._rate.acquire(1)
            t0 = time.perf_counter()

            try:
                async with session.request(
                    method=method.upper(),
                    url=url,
                    headers=hdrs,
                    params=params,
                    json=json_body,
                ) as resp:
                    elapsed = time.perf_counter() - t0
                    status = resp.status

                    external_api_requests_total.labels(
                        service=self.service, endpoint=label, status=str(status)
                    ).inc()
                    external_api_duration_seconds.labels(
                        service=self.service, endpoint=label
                    ).observe(elapsed)
                    log.info(
                        "http_response",
                        extra={
                            "method": method,
                            "url": url,
                            "status": status,
                            "elapsed_ms": int(elapsed * 1000),
                            "attempt": attempt,
                            "body_len": resp.content_length,
                        },
                    )

                    if status in RETRY_STATUS and attempt < self.max_retries:
                        await asyncio.sleep(self._backoff(attempt))
                        continue

                    # Read body before the connection is released
                    resp._body = await resp.read()
                    return resp

            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                external_api_requests_total.labels(
                    service=self.service, endpoint=label, status="error"
                ).inc()
                log.warning(
                    "http_exception",
                    extra={
                        "method": method,
                        "url": url,
                        "attempt": attempt,
                        "error": str(e) or type(e).__name__,
                    },
                )

                if attempt >= self.max_retries:
                    raise

                await asyncio.sleep(self._backoff(attempt))

    async def json(self, method: str, path: str, **kwargs) -> Any:
        """Make HTTP request and parse JSON response.

        Args:
            method: HTTP method
            path: URL path
            **kwargs: Additional arguments for request()

        Returns:
            Parsed JSON response, or None for an empty body (e.g. HTTP 204)

        Raises:
            aiohttp.ClientResponseError: If the response status is not 2xx
            json.JSONDecodeError: If response is not valid JSON

        """
        resp = await self.request(method, path, **kwargs)
        if resp.status >= 400:
            raise aiohttp.ClientResponseError(
                resp.request_info,
                resp.history,
                status=resp.status,
                message=resp.reason or "",
                headers=resp.headers,
            )

        txt = await resp.text()
        if resp.status == 204 or not txt.strip():
            return None
        try:
            return json.loads(txt)
        except json.JSONDecodeError:
            log.error(
                "json_decode_error",
                extra={"url": f"{self.base_url}{path}", "text_sample": txt[:256]},
            )
            raise


__all__ = ["BaseHTTPClient", "DEFAULT_TIMEOUT", "RETRY_STATUS"]
