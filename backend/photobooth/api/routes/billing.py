"""Billing Routes — Stripe checkout for admins and the signed webhook endpoint.

Invariants:
    - The webhook reads the raw body: the signature covers the exact bytes Stripe sent
    - An unset webhook secret answers 503, never "accept unsigned"
"""

import logging
import time

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_stripe, require_admin
from photobooth.config import Settings, get_settings
from photobooth.core.errors import IntegrationNotConfiguredError
from photobooth.core.stripe_signature import verify_event
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.stripe_client import StripeClient
from photobooth.models import AdminUser
from photobooth.schemas.billing import CheckoutRequest, CheckoutResponse, WebhookAck
from photobooth.services import billing

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/billing", tags=["billing"])


@router.post("/checkout-session", response_model=CheckoutResponse)
async def create_checkout_session(
    body: CheckoutRequest,
    admin: AdminUser = Depends(require_admin),
    settings: Settings = Depends(get_settings),
    stripe: StripeClient = Depends(get_stripe),
):
    session = await billing.start_checkout(
        stripe, admin, body.price_id, settings.public_base_url, plan=body.plan,
    )
    return CheckoutResponse(session_id=session["id"], url=session["url"])


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not settings.stripe_webhook_secret:
        raise IntegrationNotConfiguredError("stripe_webhook")
    payload = await request.body()
    event = verify_event(
        payload, stripe_signature, settings.stripe_webhook_secret, now=int(time.time()),
    )
    handled = await billing.apply_event(db, event)
    logger.info(f"Stripe event {event['type']} received", extra={"provider": "stripe"})
    return WebhookAck(handled=handled)
