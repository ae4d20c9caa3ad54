"""Admin Accounts — registration, bootstrap, login and token resolution.

Invariants:
    - Emails arrive normalised (schemas/auth.py); uniqueness enforced here with 409
    - Inactive admins can neither log in nor use an existing token (403)
    - A token whose subject no longer exists is an AuthenticationError, not a 404
    - Bootstrap creation compares the secret in constant time and is refused
      outright when no secret is configured

Design Decisions:
    - Stateless JWT: nothing stored per login apart from last_login
    - Token expiry comes from settings.admin_session_days (default 7)
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.config import Settings
from photobooth.core.errors import (
    AuthenticationError, ConflictError, PermissionDeniedError,
)
from photobooth.core.security import (
    create_access_token, decode_access_token, hash_password, verify_password,
)
from photobooth.models.admin_user import AdminUser

logger = logging.getLogger(__name__)


async def find_by_email(db: AsyncSession, email: str) -> AdminUser | None:
    result = await db.execute(select(AdminUser).where(AdminUser.email == email))
    return result.scalar_one_or_none()


async def register_admin(
    db: AsyncSession, email: str, password: str, company_name: str | None = None,
) -> AdminUser:
    """Create an admin account. Duplicate email → ConflictError."""
    if await find_by_email(db, email):
        raise ConflictError(f"An account already exists for {email}")
    admin = AdminUser(
        email=email,
        password_hash=hash_password(password),
        company_name=company_name,
        is_active=True,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info("Admin registered", extra={"admin_id": str(admin.id)})
    return admin


async def create_admin_with_secret(
    db: AsyncSession,
    secret: str,
    expected_secret: str,
    email: str,
    password: str,
    company_name: str | None = None,
) -> AdminUser:
    """Bootstrap path used before any admin can log in."""
    if not expected_secret or not hmac.compare_digest(secret, expected_secret):
        logger.warning("Admin bootstrap refused: bad secret")
        raise PermissionDeniedError("Invalid admin creation secret")
    return await register_admin(db, email, password, company_name)


async def authenticate(db: AsyncSession, email: str, password: str) -> AdminUser:
    """Check credentials and stamp last_login."""
    admin = await find_by_email(db, email)
    if admin is None or not verify_password(password, admin.password_hash):
        raise AuthenticationError("Invalid email or password")
    if not admin.is_active:
        raise PermissionDeniedError("Account is disabled")
    admin.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(admin)
    logger.info("Admin logged in", extra={"admin_id": str(admin.id)})
    return admin


def issue_token(admin: AdminUser, settings: Settings) -> tuple[str, datetime]:
    """Sign a session token; returns (token, expires_at)."""
    issued = datetime.now(timezone.utc)
    lifetime = timedelta(days=settings.admin_session_days)
    token = create_access_token(
        str(admin.id), admin.email, settings.jwt_secret,
        algorithm=settings.jwt_algorithm, expires_in=lifetime, now=issued,
    )
    return token, issued + lifetime


async def resolve_token(db: AsyncSession, token: str, settings: Settings) -> AdminUser:
    """Decode a session token and load its (active) admin."""
    claims = decode_access_token(token, settings.jwt_secret, settings.jwt_algorithm)
    try:
        admin_id = UUID(claims["sub"])
    except (ValueError, TypeError):
        raise AuthenticationError("Invalid session token")
    admin = await db.get(AdminUser, admin_id)
    if admin is None:
        raise AuthenticationError("Account no longer exists")
    if not admin.is_active:
        raise PermissionDeniedError("Account is disabled")
    return admin
