"""Billing Schemas — Stripe checkout payloads."""

from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    price_id: str = Field(min_length=1, max_length=200)
    plan: str | None = Field(None, max_length=50)


class CheckoutResponse(BaseModel):
    session_id: str | None
    url: str | None


class WebhookAck(BaseModel):
    received: bool = True
    handled: bool
