"""Reusable base for any external HTTP API client."""

import logging
from typing import Any, Optional

import httpx

from catalog_verifier.utils.retry import with_async_retry

logger = logging.getLogger(__name__)


class BaseAsyncHTTPClient:
    """Thin wrapper around httpx.AsyncClient with logging, error handling and retry.

    Subclasses (VisualRecognitionClient, etc.) only need to implement domain methods.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        retry_max_attempts: int = 3,
        retry_initial_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._retry_max_attempts = retry_max_attempts
        self._retry_initial_delay = retry_initial_delay

    # ── HTTP helpers ─────────────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    async def _post(self, endpoint: str, payload: dict) -> Any:
        """POST request with retry logic.

        Retries on:
        - 5xx server errors
        - 429 rate limit
        - Network errors
        - Timeouts

        Does NOT retry on:
        - 4xx client errors (bad request, auth failure, etc.); returns None
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        @with_async_retry(
            max_attempts=self._retry_max_attempts,
            initial_delay=self._retry_initial_delay,
            retry_on=(
                httpx.HTTPStatusError,
                httpx.TimeoutException,
                httpx.NetworkError,
            ),
        )
        async def _do_post():
            logger.debug("POST %s", url)
            resp = await self._client.post(url, json=payload, headers=self._headers())

            if resp.status_code >= 500 or resp.status_code == 429:
                logger.warning("Retryable error %d from %s", resp.status_code, url)
                resp.raise_for_status()
            elif resp.status_code >= 400:
                logger.warning("Client error %d for %s - not retrying", resp.status_code, url)
                return None

            return resp.json()

        return await _do_post()

    # ── lifecycle ────────────────────────────────────────────────────

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
