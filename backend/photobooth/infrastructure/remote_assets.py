"""Remote Assets — download images/videos by URL (style previews, logos, vendor results).

Invariants:
    - Only http(s) URLs and data: URIs are accepted
    - Bodies are streamed; a download stops as soon as it passes max_bytes
    - Failures surface as ExternalServiceError(provider="remote"); transport error
      details are logged, never put in the error message
"""

import base64
import binascii
import logging

import httpx

from photobooth.core.errors import ExternalServiceError, ValidationFailedError

logger = logging.getLogger(__name__)

MAX_BYTES = 50 * 1024 * 1024


def decode_data_uri(uri: str) -> tuple[bytes, str]:
    """'data:image/png;base64,....' → (bytes, 'image/png')."""
    header, _, payload = uri.partition(",")
    if not header.startswith("data:") or ";base64" not in header or not payload:
        raise ValidationFailedError("Malformed data URI", "image")
    content_type = header[5:].split(";", 1)[0] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), content_type
    except (binascii.Error, ValueError):
        raise ValidationFailedError("Data URI payload is not valid base64", "image")


class RemoteAssetFetcher:
    """Small httpx wrapper; one instance per process."""

    def __init__(
        self,
        timeout_seconds: int = 30,
        max_bytes: int = MAX_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            timeout=timeout_seconds, follow_redirects=True, transport=transport,
        )
        self.max_bytes = max_bytes

    async def fetch(self, url: str) -> tuple[bytes, str]:
        """Return (content, content_type) for an http(s) URL or a data: URI."""
        if url.startswith("data:"):
            return decode_data_uri(url)
        if not url.startswith(("http://", "https://")):
            raise ValidationFailedError(f"Unsupported URL scheme: {url[:40]}", "url")
        try:
            async with self.client.stream("GET", url) as response:
                if response.is_error:
                    raise ExternalServiceError(
                        f"HTTP {response.status_code} for {url}", "remote", "bad_status",
                    )
                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    raise ExternalServiceError("Asset too large", "remote", "too_large")
                content = bytearray()
                async for chunk in response.aiter_bytes():
                    content.extend(chunk)
                    if len(content) > self.max_bytes:
                        raise ExternalServiceError("Asset too large", "remote", "too_large")
        except httpx.HTTPError as e:
            logger.warning(f"Remote fetch failed for {url}: {e}", extra={"provider": "remote"})
            raise ExternalServiceError("Asset could not be downloaded", "remote", "unreachable")
        content_type = response.headers.get("content-type", "application/octet-stream")
        return bytes(content), content_type.split(";", 1)[0].strip()

    async def close(self) -> None:
        await self.client.aclose()
