"""Resilient HTTP fetch client.

Wraps a single reusable ``httpx.AsyncClient`` and adds a per-attempt timeout
plus bounded retry for transient transport failures.

Retry policy:
    - Timeouts (no response within ``timeout``) and transport errors are
      retried. ``max_retries`` is the total number of attempts.
    - Before attempt ``n + 1`` the client waits ``retry_delay * n`` seconds
      (1x, 2x, 3x ... the base delay).
    - Any other ``CatalogError`` raised while sending is a classified
      application failure and propagates on first occurrence.
    - When attempts run out the last condition is raised as
      ``TimeoutFailure`` or ``NetworkFailure``.

Example usage:
    async with RetryingHttpClient(max_retries=3, timeout=30.0) as client:
        response = await client.get(url, headers={"x-api-key": key})
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from catbreeds.core.errors import (
    CatalogError,
    NetworkFailure,
    TimeoutFailure,
)
from catbreeds.core.redaction import redact_headers, redact_secrets

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_DELAY = 0.5

SleepFunc = Callable[[float], Awaitable[None]]


class RetryingHttpClient:
    """HTTP GET client with timeout and linear-growth retry backoff.

    The underlying ``httpx.AsyncClient`` is created on first use (or injected)
    and reused for every request until ``aclose()`` is called. Callers own the
    lifecycle: close the client when finished, or use it as an async context
    manager.

    Attributes:
        max_retries: Total attempts per request (default: 3)
        timeout: Deadline for each attempt in seconds (default: 30.0)
        retry_delay: Base backoff delay in seconds (default: 0.5)
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: float = DEFAULT_TIMEOUT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        *,
        client: Optional[httpx.AsyncClient] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        """Initialize the client.

        Args:
            max_retries: Total number of attempts; must be at least 1
            timeout: Per-attempt timeout in seconds
            retry_delay: Base delay multiplied by the attempt number
            client: Pre-built transport handle (tests inject one backed by
                ``httpx.MockTransport``)
            sleep_func: Injectable async sleep for time control in tests
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self.max_retries = max_retries
        self.timeout = timeout
        self.retry_delay = retry_delay
        self._client = client
        self._sleep = sleep_func or asyncio.sleep
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_client(self) -> httpx.AsyncClient:
        if self._closed:
            raise RuntimeError("RetryingHttpClient is closed")
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def backoff_delay(self, attempt: int) -> float:
        """Return the wait before the attempt following *attempt* (1-based)."""
        return self.retry_delay * attempt

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Issue a GET request, retrying transient failures.

        Args:
            url: Target URL
            headers: Request headers
            params: Query string parameters

        Returns:
            The first response received, whatever its status code

        Raises:
            TimeoutFailure: Every attempt timed out (or the last one did)
            NetworkFailure: Every attempt failed at the transport level
            CatalogError: Any other classified failure, without retry
        """
        client = self._get_client()
        attempt = 0

        while True:
            attempt += 1
            try:
                return await asyncio.wait_for(
                    client.get(url, headers=headers, params=params),
                    timeout=self.timeout,
                )
            except (asyncio.TimeoutError, httpx.TimeoutException, TimeoutFailure) as e:
                cause: Exception = e
                failure: CatalogError = (
                    e
                    if isinstance(e, TimeoutFailure)
                    else TimeoutFailure(
                        f"Request exceeded {self.timeout:g} seconds",
                        timeout_seconds=self.timeout,
                    )
                )
            except (NetworkFailure, httpx.TransportError, OSError) as e:
                cause = e
                failure = (
                    e
                    if isinstance(e, NetworkFailure)
                    else NetworkFailure(
                        redact_secrets(f"Network error: {e}"),
                        original_error=e,
                    )
                )
            except CatalogError:
                raise

            if attempt >= self.max_retries:
                logger.error(
                    "GET %s failed after %d attempts: %s",
                    url,
                    attempt,
                    failure.message,
                )
                # Already-classified failures keep their own message
                if failure is cause:
                    raise failure
                raise failure from cause

            delay = self.backoff_delay(attempt)
            logger.warning(
                "GET %s attempt %d/%d failed (%s); retrying in %.2fs headers=%s",
                url,
                attempt,
                self.max_retries,
                type(cause).__name__,
                delay,
                redact_headers(headers),
            )
            await self._sleep(delay)

    async def aclose(self) -> None:
        """Release the underlying transport handle."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._closed = True

    async def __aenter__(self) -> "RetryingHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
