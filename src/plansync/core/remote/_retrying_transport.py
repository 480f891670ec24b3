"""httpx async transport wrapper that retries transient remote-store failures."""

from __future__ import annotations

import asyncio
import logging
import random
import time

import httpx

_LOG = logging.getLogger(__name__)

# Status codes considered transient and eligible for automatic retry.
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class RetryingTransport(httpx.AsyncBaseTransport):
    """Retries transport errors and transient statuses with exponential backoff.

    A 429 response pauses every request sharing this transport until its
    ``Retry-After`` window has passed. Once retries are exhausted the last
    response (or transport error) is handed back to the caller unchanged.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        max_backoff: float = 4.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._max_backoff = max_backoff

        self._pause_lock = asyncio.Lock()
        self._pause_clear = asyncio.Event()
        self._pause_clear.set()
        self._pause_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            await self._pause_clear.wait()
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError:
                if attempt >= self._max_retries:
                    raise
                await self._sleep_backoff(attempt, request)
                attempt += 1
                continue

            if response.status_code not in RETRYABLE_STATUS_CODES or attempt >= self._max_retries:
                return response

            retry_after = self._parse_retry_after(response)
            await response.aclose()
            if response.status_code == 429:
                await self._pause(retry_after)
            elif retry_after > 0:
                await asyncio.sleep(retry_after)
            await self._sleep_backoff(attempt, request)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _pause(self, retry_after: float) -> None:
        async with self._pause_lock:
            until = time.monotonic() + max(0.0, retry_after)
            if until <= self._pause_until:
                return
            self._pause_until = until
            self._pause_clear.clear()

        await asyncio.sleep(max(0.0, self._pause_until - time.monotonic()))

        async with self._pause_lock:
            if time.monotonic() >= self._pause_until:
                self._pause_clear.set()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return 0.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return 0.0

    async def _sleep_backoff(self, attempt: int, request: httpx.Request) -> None:
        seconds = min(self._max_backoff, float(2**attempt)) + random.uniform(0.0, 0.25)
        _LOG.warning("Retrying %s %s (attempt %d)", request.method, request.url.path, attempt + 1)
        await asyncio.sleep(seconds)
