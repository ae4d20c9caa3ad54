"""Billing — Stripe checkout sessions and subscription webhook events.

Invariants:
    - Webhooks are applied only after core/stripe_signature verification
    - checkout.session.completed: admin matched by metadata.admin_id, else customer email;
      stripe_customer_id, stripe_subscription_id and plan are stored
    - customer.subscription.deleted: subscription id and plan cleared on the admin
      holding that subscription
    - Any other event type is acknowledged and ignored (handled=False)
    - Unknown admins are logged, not errors: Stripe must not retry forever
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.infrastructure.stripe_client import StripeClient
from photobooth.models import AdminUser

logger = logging.getLogger(__name__)

CHOOSE_PLAN_PATH = "/photobooth-ia/admin/choose-plan"


def checkout_urls(public_base_url: str) -> tuple[str, str]:
    base = public_base_url.rstrip("/") + CHOOSE_PLAN_PATH
    return f"{base}?success=1", f"{base}?canceled=1"


async def start_checkout(
    stripe: StripeClient,
    admin: AdminUser,
    price_id: str,
    public_base_url: str,
    plan: str | None = None,
) -> dict:
    success_url, cancel_url = checkout_urls(public_base_url)
    metadata = {"admin_id": str(admin.id)}
    if plan:
        metadata["plan"] = plan
    return await stripe.create_checkout_session(
        price_id, success_url, cancel_url,
        customer_email=admin.email, metadata=metadata,
    )


async def _find_admin(db: AsyncSession, admin_id: str | None, email: str | None) -> AdminUser | None:
    if admin_id:
        try:
            admin = await db.get(AdminUser, UUID(admin_id))
        except ValueError:
            admin = None
        if admin:
            return admin
    if email:
        result = await db.execute(select(AdminUser).where(AdminUser.email == email.lower()))
        return result.scalar_one_or_none()
    return None


async def _checkout_completed(db: AsyncSession, session: dict) -> bool:
    metadata = session.get("metadata") or {}
    email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
    admin = await _find_admin(db, metadata.get("admin_id"), email)
    if admin is None:
        logger.warning("Checkout completed for an unknown admin", extra={"provider": "stripe"})
        return False
    admin.stripe_customer_id = session.get("customer")
    admin.stripe_subscription_id = session.get("subscription")
    admin.plan = metadata.get("plan") or "subscribed"
    await db.commit()
    logger.info("Subscription activated", extra={"admin_id": str(admin.id), "provider": "stripe"})
    return True


async def _subscription_deleted(db: AsyncSession, subscription: dict) -> bool:
    result = await db.execute(
        select(AdminUser).where(AdminUser.stripe_subscription_id == subscription.get("id")),
    )
    admin = result.scalar_one_or_none()
    if admin is None:
        return False
    admin.stripe_subscription_id = None
    admin.plan = None
    await db.commit()
    logger.info("Subscription cancelled", extra={"admin_id": str(admin.id), "provider": "stripe"})
    return True


async def apply_event(db: AsyncSession, event: dict) -> bool:
    """Apply a verified Stripe event; returns whether it changed anything."""
    event_type = event.get("type")
    obj = (event.get("data") or {}).get("object") or {}
    logger.info(f"Stripe event {event_type}", extra={"event_type": event_type})
    if event_type == "checkout.session.completed":
        return await _checkout_completed(db, obj)
    if event_type == "customer.subscription.deleted":
        return await _subscription_deleted(db, obj)
    return False
