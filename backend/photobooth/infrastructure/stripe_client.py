"""Stripe Client — creates subscription Checkout Sessions through the Stripe REST API.

Invariants:
    - Requests are form-encoded with bracketed keys (line_items[0][price]=...)
    - Authentication: secret key as HTTP basic username
    - Stripe error bodies ({"error": {"message", "type"}}) mapped to ExternalServiceError;
      the Stripe message is logged, the client sees only the error type

Design Decisions:
    - httpx over the stripe SDK: a single endpoint is needed; webhook verification
      lives in core/stripe_signature.py
"""

import logging

import httpx

from photobooth.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

PROVIDER = "stripe"


class StripeClient:
    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com/v1",
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=api_base.rstrip("/"),
            auth=(secret_key, ""),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def create_checkout_session(
        self,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> dict:
        """Create a subscription checkout session; returns {"id", "url"}."""
        form = {
            "mode": "subscription",
            "payment_method_types[0]": "card",
            "line_items[0][price]": price_id,
            "line_items[0][quantity]": "1",
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_email:
            form["customer_email"] = customer_email
        for key, value in (metadata or {}).items():
            form[f"metadata[{key}]"] = value
            form[f"subscription_data[metadata][{key}]"] = value

        try:
            response = await self.client.post("/checkout/sessions", data=form)
        except httpx.HTTPError as e:
            logger.error(f"Stripe unreachable: {e}", extra={"provider": PROVIDER})
            raise ExternalServiceError("Stripe could not be reached", PROVIDER, "unreachable")

        body = _json_or_empty(response)
        if response.is_error:
            error = body.get("error", {}) if isinstance(body, dict) else {}
            logger.error(
                f"Stripe checkout failed: {error.get('message', response.text[:300])}",
                extra={"provider": PROVIDER},
            )
            raise ExternalServiceError(
                "Checkout session could not be created", PROVIDER,
                error.get("type", f"http_{response.status_code}"),
            )
        logger.info("Stripe checkout session created", extra={"provider": PROVIDER})
        return {"id": body.get("id"), "url": body.get("url")}

    async def close(self) -> None:
        await self.client.aclose()


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
