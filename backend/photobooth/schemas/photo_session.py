"""Photo Session Schemas — capture results posted by booths and admin listings."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from photobooth.core.domain_types import StyleGender
from photobooth.schemas.common import ORMModel, WriteModel, normalize_email


class SessionRecord(WriteModel):
    """A booth reporting a finished capture (generation done client-side or elsewhere)."""
    style_id: UUID | None = None
    gender: StyleGender | None = None
    user_email: EmailStr | None = None
    result_image_url: str | None = Field(None, max_length=2000)
    result_s3_url: str | None = Field(None, max_length=2000)
    watermarked_url: str | None = Field(None, max_length=2000)
    processing_time_ms: int | None = Field(None, ge=0)
    is_success: bool = True
    error_message: str | None = Field(None, max_length=5000)

    _lower_email = field_validator("user_email", mode="before")(normalize_email)


class PhotoSessionResponse(ORMModel):
    id: UUID
    project_id: UUID | None = None
    style_id: UUID | None = None
    gender: str | None = None
    user_email: str | None = None
    result_image_url: str | None = None
    result_s3_url: str | None = None
    watermarked_url: str | None = None
    processing_time_ms: int | None = None
    is_success: bool
    error_message: str | None = None
    moderation: str | None = None
    created_at: datetime


class PhotoSessionPage(BaseModel):
    sessions: list[PhotoSessionResponse]
    total: int
    limit: int
    offset: int
