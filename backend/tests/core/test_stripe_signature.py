"""Stripe Webhook Signature — header parsing, HMAC check and replay window."""

import json

import pytest

from photobooth.core.errors import WebhookSignatureError
from photobooth.core.stripe_signature import compute_signature, verify_event

SECRET = "whsec_test"
NOW = 1_700_000_000
PAYLOAD = json.dumps({"type": "checkout.session.completed", "data": {}}).encode()


def _header(payload: bytes = PAYLOAD, timestamp: int = NOW, secret: str = SECRET) -> str:
    return f"t={timestamp},v1={compute_signature(payload, timestamp, secret)}"


def test_valid_signature_returns_event():
    event = verify_event(PAYLOAD, _header(), SECRET, now=NOW)
    assert event["type"] == "checkout.session.completed"


def test_any_matching_v1_signature_is_accepted():
    header = f"t={NOW},v1=deadbeef,v0=ignored,v1={compute_signature(PAYLOAD, NOW, SECRET)}"
    assert verify_event(PAYLOAD, header, SECRET, now=NOW)["type"]


def test_missing_header():
    with pytest.raises(WebhookSignatureError):
        verify_event(PAYLOAD, None, SECRET, now=NOW)


def test_wrong_secret():
    with pytest.raises(WebhookSignatureError):
        verify_event(PAYLOAD, _header(secret="other"), SECRET, now=NOW)


def test_tampered_payload():
    with pytest.raises(WebhookSignatureError):
        verify_event(PAYLOAD + b" ", _header(), SECRET, now=NOW)


def test_stale_timestamp():
    with pytest.raises(WebhookSignatureError):
        verify_event(PAYLOAD, _header(), SECRET, now=NOW + 301)


def test_malformed_header():
    with pytest.raises(WebhookSignatureError):
        verify_event(PAYLOAD, "t=abc,v1=00", SECRET, now=NOW)
    with pytest.raises(WebhookSignatureError):
        verify_event(PAYLOAD, "v1=00", SECRET, now=NOW)


def test_payload_must_be_an_event():
    payload = b'{"no_type": true}'
    with pytest.raises(WebhookSignatureError):
        verify_event(payload, _header(payload), SECRET, now=NOW)
