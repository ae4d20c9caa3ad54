"""Resilient fal.ai Client — retry and error mapping over httpx.MockTransport."""

import httpx
import pytest

from photobooth.core.errors import ExternalServiceError
from photobooth.infrastructure.fal_client import ResilientFalClient


def _client(handler, max_retries=2) -> ResilientFalClient:
    return ResilientFalClient(
        api_key="fal-test",
        base_url="https://fal.test",
        max_retries=max_retries,
        base_delay_ms=0,
        transport=httpx.MockTransport(handler),
    )


async def test_run_posts_arguments_with_key_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json={"image": {"url": "https://cdn/out.jpg"}})

    client = _client(handler)
    result = await client.run("fal-ai/background-removal", {"image_url": "x"})
    await client.close()

    assert result == {"image": {"url": "https://cdn/out.jpg"}}
    assert seen["path"] == "/fal-ai/background-removal"
    assert seen["auth"] == "Key fal-test"


async def test_server_errors_are_retried():
    calls = []

    def handler(request):
        calls.append(1)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"url": "https://cdn/ok.jpg"})

    client = _client(handler)
    assert await client.run("app", {}) == {"url": "https://cdn/ok.jpg"}
    assert len(calls) == 3
    await client.close()


async def test_retries_exhausted_raise_unavailable():
    client = _client(lambda request: httpx.Response(500), max_retries=1)
    with pytest.raises(ExternalServiceError) as exc:
        await client.run("app", {})
    assert exc.value.error_type == "unavailable"
    assert exc.value.provider == "fal"
    await client.close()


async def test_client_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(422, json={"detail": "bad input"})

    client = _client(handler)
    with pytest.raises(ExternalServiceError) as exc:
        await client.run("app", {})
    assert exc.value.error_type == "client_error"
    assert len(calls) == 1
    await client.close()


async def test_non_object_body_is_bad_response():
    client = _client(lambda request: httpx.Response(200, json=["nope"]))
    with pytest.raises(ExternalServiceError) as exc:
        await client.run("app", {})
    assert exc.value.error_type == "bad_response"
    await client.close()


async def test_rate_limit_is_retried():
    calls = []

    def handler(request):
        calls.append(1)
        if len(calls) == 1:
            return httpx.Response(429, headers={"Retry-After": "0"})
        return httpx.Response(200, json={"url": "https://cdn/late.jpg"})

    client = _client(handler)
    assert await client.run("app", {}) == {"url": "https://cdn/late.jpg"}
    assert len(calls) == 2
    await client.close()


async def test_retry_after_reported_when_retries_exhausted():
    client = _client(
        lambda request: httpx.Response(429, headers={"Retry-After": "2"}), max_retries=0,
    )
    with pytest.raises(ExternalServiceError) as exc:
        await client.run("app", {})
    assert exc.value.error_type == "unavailable"
    assert exc.value.context.retry_after_ms == 2000
    await client.close()


def test_retry_after_header_parsing():
    client = _client(lambda request: httpx.Response(200, json={}))
    assert client._extract_retry_after(httpx.Response(429, headers={"Retry-After": "5"})) == 5000
    assert client._extract_retry_after(httpx.Response(429, headers={"Retry-After": "900"})) == 30_000
    assert client._extract_retry_after(
        httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"}),
    ) is None
    assert client._extract_retry_after(httpx.Response(429)) is None
