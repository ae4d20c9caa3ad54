"""API Dependencies — admin authentication and vendor adapter providers.

Invariants:
    - require_admin accepts "Authorization: Bearer <jwt>" first, then the session cookie
    - Adapters are built once per process and reused; an adapter whose credentials
      are missing raises IntegrationNotConfiguredError (503) only when a route asks for it
    - Tests swap every provider through app.dependency_overrides

Design Decisions:
    - Providers as plain functions (not classes): FastAPI override keys stay obvious
    - HTTP-based adapters keep a pooled httpx client; close_adapters() runs at shutdown
"""

import logging
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.config import Settings, get_settings
from photobooth.core.errors import AuthenticationError, IntegrationNotConfiguredError
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.fal_client import ResilientFalClient
from photobooth.infrastructure.ffmpeg import FfmpegRunner
from photobooth.infrastructure.mailer import SmtpMailer
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.replicate_client import ResilientReplicateClient
from photobooth.infrastructure.storage import LocalStorage, ObjectStorage, S3Storage
from photobooth.infrastructure.stripe_client import StripeClient
from photobooth.models import AdminUser, Project
from photobooth.services import admin_accounts, projects

logger = logging.getLogger(__name__)

_adapters: dict[str, object] = {}


def _cached(name: str, factory):
    if name not in _adapters:
        _adapters[name] = factory()
    return _adapters[name]


async def close_adapters() -> None:
    for name, adapter in list(_adapters.items()):
        close = getattr(adapter, "close", None)
        if close is not None:
            await close()
        _adapters.pop(name, None)


# ─── Authentication ─────────────────────────────────────────────

def _bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_admin(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AdminUser:
    token = _bearer_token(request.headers.get("authorization")) or request.cookies.get(
        settings.admin_cookie_name,
    )
    if not token:
        raise AuthenticationError()
    return await admin_accounts.resolve_token(db, token, settings)


async def get_owned_project_or_404(
    project_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Project:
    return await projects.get_owned_project(db, project_id, admin.id)


# ─── Vendor adapters ────────────────────────────────────────────

def get_storage() -> ObjectStorage:
    settings = get_settings()
    if settings.storage_backend == "local":
        return _cached("storage", lambda: LocalStorage(
            settings.local_storage_dir, settings.local_storage_url,
        ))
    if not settings.s3_bucket:
        raise IntegrationNotConfiguredError("s3")
    return _cached("storage", lambda: S3Storage(
        bucket=settings.s3_bucket,
        region=settings.aws_region,
        access_key_id=settings.aws_access_key_id or None,
        secret_access_key=settings.aws_secret_access_key or None,
        public_base_url=settings.s3_public_base_url or None,
    ))


def get_replicate() -> ResilientReplicateClient:
    settings = get_settings()
    if not settings.replicate_api_token:
        raise IntegrationNotConfiguredError("replicate")
    return _cached("replicate", lambda: ResilientReplicateClient(
        api_token=settings.replicate_api_token,
        max_retries=settings.replicate_max_retries,
        base_delay_ms=settings.replicate_base_delay_ms,
        max_delay_ms=settings.replicate_max_delay_ms,
    ))


def get_fal() -> ResilientFalClient:
    settings = get_settings()
    if not settings.fal_key:
        raise IntegrationNotConfiguredError("fal")
    return _cached("fal", lambda: ResilientFalClient(
        api_key=settings.fal_key,
        base_url=settings.fal_base_url,
        timeout_seconds=settings.fal_timeout_seconds,
        max_retries=settings.fal_max_retries,
        base_delay_ms=settings.fal_base_delay_ms,
        max_delay_ms=settings.fal_max_delay_ms,
    ))


def get_stripe() -> StripeClient:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise IntegrationNotConfiguredError("stripe")
    return _cached("stripe", lambda: StripeClient(
        settings.stripe_secret_key, api_base=settings.stripe_api_base,
    ))


def get_fetcher() -> RemoteAssetFetcher:
    settings = get_settings()
    return _cached("fetcher", lambda: RemoteAssetFetcher(
        timeout_seconds=settings.remote_fetch_timeout_seconds,
    ))


def get_mailer() -> SmtpMailer:
    return _cached("mailer", SmtpMailer)


def get_ffmpeg() -> FfmpegRunner:
    settings = get_settings()
    return _cached("ffmpeg", lambda: FfmpegRunner(
        settings.ffmpeg_binary, settings.ffprobe_binary,
    ))


def integration_status(settings: Settings) -> dict[str, bool]:
    """Which vendor integrations have credentials (never the credentials themselves)."""
    return {
        "storage": settings.storage_backend == "local" or bool(settings.s3_bucket),
        "replicate": bool(settings.replicate_api_token),
        "fal": bool(settings.fal_key),
        "stripe": bool(settings.stripe_secret_key),
        "stripe_webhook": bool(settings.stripe_webhook_secret),
        "ffmpeg": get_ffmpeg().available(),
    }
