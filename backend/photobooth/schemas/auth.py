"""Admin Auth Schemas — registration, login and shared-token validation payloads.

Invariants:
    - Emails stripped and lowercased, then validated as EmailStr (email-validator)
    - Passwords: 6-72 characters (72 is bcrypt's input limit)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from photobooth.schemas.common import ORMModel, normalize_email


class _Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)

    _lower_email = field_validator("email", mode="before")(normalize_email)


class RegisterRequest(_Credentials):
    company_name: str | None = Field(None, max_length=200)


class LoginRequest(_Credentials):
    password: str = Field(min_length=1, max_length=72)


class AdminCreateRequest(RegisterRequest):
    """Bootstrap an admin account without an existing session."""
    secret_key: str = Field(min_length=1)


class SharedTokenRequest(BaseModel):
    token: str = Field(min_length=1)


class AdminResponse(ORMModel):
    id: UUID
    email: str
    company_name: str | None = None
    is_active: bool
    plan: str | None = None
    created_at: datetime
    last_login: datetime | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    admin: AdminResponse


class SharedTokenResponse(BaseModel):
    valid: bool
    admin: AdminResponse | None = None
