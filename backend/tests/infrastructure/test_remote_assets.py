"""Remote Assets — data URIs, http downloads and size guard."""

import httpx
import pytest

from photobooth.core.errors import ExternalServiceError, ValidationFailedError
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher, decode_data_uri


def test_decode_data_uri():
    assert decode_data_uri("data:image/png;base64,aGk=") == (b"hi", "image/png")


def test_decode_data_uri_rejects_garbage():
    with pytest.raises(ValidationFailedError):
        decode_data_uri("data:image/png,plain")
    with pytest.raises(ValidationFailedError):
        decode_data_uri("data:image/png;base64,***")


async def test_fetch_http_returns_bytes_and_content_type():
    def handler(request):
        return httpx.Response(200, content=b"jpeg", headers={"content-type": "image/jpeg; charset=binary"})

    fetcher = RemoteAssetFetcher(transport=httpx.MockTransport(handler))
    assert await fetcher.fetch("https://cdn.test/a.jpg") == (b"jpeg", "image/jpeg")
    await fetcher.close()


async def test_fetch_rejects_other_schemes():
    fetcher = RemoteAssetFetcher(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with pytest.raises(ValidationFailedError):
        await fetcher.fetch("file:///etc/passwd")
    await fetcher.close()


async def test_fetch_maps_error_status():
    fetcher = RemoteAssetFetcher(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    with pytest.raises(ExternalServiceError) as exc:
        await fetcher.fetch("https://cdn.test/missing.jpg")
    assert exc.value.error_type == "bad_status"
    await fetcher.close()


async def test_fetch_refuses_large_assets():
    fetcher = RemoteAssetFetcher(
        max_bytes=3, transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"four")),
    )
    with pytest.raises(ExternalServiceError) as exc:
        await fetcher.fetch("https://cdn.test/big.jpg")
    assert exc.value.error_type == "too_large"
    await fetcher.close()


async def test_fetch_stops_streaming_once_too_large():
    served = []

    async def body():
        for _ in range(10):
            served.append(4)
            yield b"abcd"

    fetcher = RemoteAssetFetcher(
        max_bytes=6, transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body())),
    )
    with pytest.raises(ExternalServiceError) as exc:
        await fetcher.fetch("https://cdn.test/endless.mp4")
    assert exc.value.error_type == "too_large"
    assert len(served) < 10
    await fetcher.close()


async def test_transport_failure_message_is_generic():
    def handler(request):
        raise httpx.ConnectError("connect to 10.0.0.7:443 refused", request=request)

    fetcher = RemoteAssetFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(ExternalServiceError) as exc:
        await fetcher.fetch("https://cdn.test/a.jpg")
    assert exc.value.error_type == "unreachable"
    assert "10.0.0.7" not in exc.value.message
    await fetcher.close()
