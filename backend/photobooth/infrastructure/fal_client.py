"""Resilient fal.ai Client — synchronous-run REST calls over httpx with retry and error mapping.

Invariants:
    - POST {base_url}/{app_id} with JSON arguments, header "Authorization: Key <fal_key>"
    - 429: waits Retry-After (seconds) when present, else exponential backoff with jitter
    - 5xx and connection/timeout errors: retried up to max_retries
    - Other 4xx: immediate ExternalServiceError(provider="fal", "client_error")
    - Response bodies must be JSON objects

Design Decisions:
    - Plain httpx over the fal SDK: one endpoint shape, and tests swap in
      httpx.MockTransport without monkeypatching a vendor module
    - One AsyncClient per instance, closed by the FastAPI lifespan
"""

import asyncio
import logging
import random
import time

import httpx

from photobooth.core.errors import ErrorContext, ExternalServiceError

logger = logging.getLogger(__name__)

PROVIDER = "fal"


class ResilientFalClient:
    """Calls fal.ai model endpoints with retry logic and error mapping."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://fal.run",
        timeout_seconds: int = 300,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"Authorization": f"Key {api_key}"},
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def run(
        self, app_id: str, arguments: dict, context: ErrorContext | None = None,
    ) -> dict:
        """Run a fal app and return its JSON result."""
        for attempt in range(self.max_retries + 1):
            started = time.monotonic()
            try:
                response = await self.client.post(f"/{app_id}", json=arguments)
            except httpx.TransportError as e:
                await self._retry_or_raise(str(e), attempt, None, context)
                continue

            if response.status_code == 429 or response.status_code >= 500:
                await self._retry_or_raise(
                    f"HTTP {response.status_code}", attempt,
                    self._extract_retry_after(response), context,
                )
                continue
            if response.is_error:
                logger.error(
                    f"fal.ai rejected request: {response.status_code} {response.text[:500]}",
                    extra={"provider": PROVIDER, "model": app_id},
                )
                raise ExternalServiceError(
                    f"HTTP {response.status_code}", PROVIDER, "client_error",
                    context=context,
                )

            try:
                body = response.json()
            except ValueError:
                body = None
            if not isinstance(body, dict):
                raise ExternalServiceError(
                    "Response is not a JSON object", PROVIDER, "bad_response",
                    context=context,
                )
            logger.info(
                "fal.ai call success",
                extra={
                    "provider": PROVIDER, "model": app_id, "attempt": attempt + 1,
                    "duration_ms": int((time.monotonic() - started) * 1000),
                },
            )
            return body
        raise ExternalServiceError("Retries exhausted", PROVIDER, "unavailable", context=context)

    async def close(self) -> None:
        await self.client.aclose()

    async def _retry_or_raise(
        self, reason: str, attempt: int, retry_after_ms: int | None,
        context: ErrorContext | None,
    ) -> None:
        if attempt >= self.max_retries:
            raise ExternalServiceError(
                f"Transient failure after {self.max_retries} retries: {reason}",
                PROVIDER, "unavailable", retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"fal.ai transient error ({reason}), retry after {delay}ms",
            extra={"provider": PROVIDER, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Retry-After header in milliseconds (integer seconds form only)."""
        value = response.headers.get("retry-after")
        if value and value.strip().isdigit():
            return min(self.max_delay_ms, int(value) * 1000)
        return None
