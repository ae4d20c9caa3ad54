"""Admin Auth Routes — register, login/logout, current admin, shared-token validation.

Invariants:
    - Login sets the JWT as an HttpOnly, SameSite=Lax cookie and returns it in the body
    - Logout only clears the cookie: tokens are stateless and expire on their own
    - validate-shared-token never raises for a bad token: it answers {valid: false}
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import require_admin
from photobooth.config import Settings, get_settings
from photobooth.core.errors import AuthenticationError, PermissionDeniedError
from photobooth.infrastructure.database import get_db
from photobooth.models import AdminUser
from photobooth.schemas.auth import (
    AdminCreateRequest, AdminResponse, LoginRequest, RegisterRequest,
    SharedTokenRequest, SharedTokenResponse, TokenResponse,
)
from photobooth.services import admin_accounts

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register", response_model=AdminResponse, status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Open sign-up for a new tenant."""
    return await admin_accounts.register_admin(
        db, body.email, body.password, body.company_name,
    )


@router.post(
    "/admins", response_model=AdminResponse, status_code=status.HTTP_201_CREATED,
)
async def create_admin(
    body: AdminCreateRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an admin with the bootstrap secret."""
    return await admin_accounts.create_admin_with_secret(
        db, body.secret_key, settings.admin_signup_secret,
        body.email, body.password, body.company_name,
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    admin = await admin_accounts.authenticate(db, body.email, body.password)
    token, expires_at = admin_accounts.issue_token(admin, settings)
    response.set_cookie(
        settings.admin_cookie_name,
        token,
        max_age=settings.admin_session_days * 24 * 3600,
        httponly=True,
        secure=settings.admin_cookie_secure,
        samesite="lax",
    )
    return TokenResponse(
        access_token=token,
        expires_at=expires_at,
        admin=AdminResponse.model_validate(admin),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(settings.admin_cookie_name)


@router.get("/me", response_model=AdminResponse)
async def me(admin: AdminUser = Depends(require_admin)):
    return admin


@router.post("/validate-shared-token", response_model=SharedTokenResponse)
async def validate_shared_token(
    body: SharedTokenRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Token check used by the mosaic display app."""
    try:
        admin = await admin_accounts.resolve_token(db, body.token, settings)
    except (AuthenticationError, PermissionDeniedError) as e:
        logger.info(f"Shared token rejected: {e.message}")
        return SharedTokenResponse(valid=False)
    return SharedTokenResponse(valid=True, admin=AdminResponse.model_validate(admin))
