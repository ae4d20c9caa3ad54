"""Resilient Replicate Client — wraps replicate.Client with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): waits the throttle hint Replicate sends in the error detail
      ("Expected available in N seconds") when present, else exponential backoff
      with jitter, up to max_retries
    - Transient errors (5xx, connection/timeout): max_retries retries with backoff
    - Client errors (4xx except 429) and model failures: immediate failure, no retry
    - All failures mapped to ExternalServiceError(provider="replicate")
    - Outputs normalised to lists of URL strings (FileOutput objects never leak)

Design Decisions:
    - Wrapper over raw client: routes and services never see replicate/httpx exceptions
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - Predictions returned as plain dicts: persisted as-is in predictions.output
"""

import asyncio
import logging
import random
import re
import time

import httpx
import replicate
from replicate.exceptions import ModelError, ReplicateError

from photobooth.core.errors import ErrorContext, ExternalServiceError
from photobooth.core.generation_rules import normalize_output

logger = logging.getLogger(__name__)

PROVIDER = "replicate"

_THROTTLE_HINT = re.compile(r"available in (\d+) seconds?")


def _is_retryable(e: ReplicateError) -> bool:
    status = getattr(e, "status", None)
    return status == 429 or (status is not None and status >= 500)


def prediction_to_dict(prediction) -> dict:
    return {
        "id": prediction.id,
        "status": prediction.status,
        "output": normalize_output(prediction.output),
        "error": str(prediction.error) if prediction.error else None,
    }


class ResilientReplicateClient:
    """Wraps Replicate client with retry logic and error mapping."""

    def __init__(
        self,
        api_token: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        client: replicate.Client | None = None,
    ):
        self.client = client or replicate.Client(api_token=api_token)
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def run(
        self, model: str, model_input: dict, context: ErrorContext | None = None,
    ) -> list[str]:
        """Run a model to completion and return its output URLs."""
        output = await self._with_retry(
            "run", model, context,
            lambda: self.client.async_run(model, input=model_input),
        )
        return normalize_output(output)

    async def create_prediction(
        self,
        model: str,
        model_input: dict,
        version: str | None = None,
        context: ErrorContext | None = None,
    ) -> dict:
        """Start an async prediction (by version hash when given, else latest model)."""
        if version:
            call = lambda: self.client.predictions.async_create(  # noqa: E731
                version=version, input=model_input,
            )
        else:
            call = lambda: self.client.models.predictions.async_create(  # noqa: E731
                model=model, input=model_input,
            )
        prediction = await self._with_retry("create_prediction", model, context, call)
        return prediction_to_dict(prediction)

    async def get_prediction(
        self, prediction_id: str, context: ErrorContext | None = None,
    ) -> dict:
        prediction = await self._with_retry(
            "get_prediction", None, context,
            lambda: self.client.predictions.async_get(prediction_id),
        )
        return prediction_to_dict(prediction)

    async def _with_retry(self, operation: str, model: str | None, context, call):
        for attempt in range(self.max_retries + 1):
            started = time.monotonic()
            try:
                result = await call()
                logger.info(
                    f"Replicate {operation} success",
                    extra={
                        "provider": PROVIDER, "model": model, "attempt": attempt + 1,
                        "duration_ms": int((time.monotonic() - started) * 1000),
                    },
                )
                return result

            except ModelError as e:
                raise ExternalServiceError(
                    str(e), PROVIDER, "model_error", context=context,
                )

            except ReplicateError as e:
                if not _is_retryable(e):
                    raise ExternalServiceError(
                        str(e), PROVIDER, "client_error", context=context,
                    )
                await self._handle_transient_error(
                    e, attempt, context, self._extract_retry_after(e),
                )

            except (httpx.TransportError, httpx.TimeoutException) as e:
                await self._handle_transient_error(e, attempt, context)

    async def _handle_transient_error(
        self,
        e: Exception,
        attempt: int,
        context: ErrorContext | None,
        retry_after_ms: int | None = None,
    ) -> None:
        if attempt >= self.max_retries:
            raise ExternalServiceError(
                f"Transient failure after {self.max_retries} retries: {e}",
                PROVIDER, "unavailable", retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Replicate transient error, retry after {delay}ms: {e}",
            extra={"provider": PROVIDER, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, e: ReplicateError) -> int | None:
        """Throttle hint in milliseconds, only on 429."""
        if getattr(e, "status", None) != 429:
            return None
        match = _THROTTLE_HINT.search(getattr(e, "detail", None) or "")
        if match:
            return min(self.max_delay_ms, int(match.group(1)) * 1000)
        return None
