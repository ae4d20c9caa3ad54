"""Project Schemas — branding, watermark, email and capture-flow settings payloads.

Invariants:
    - ProjectCreate.slug optional: derived from name (asset_naming.slugify) when absent
    - Slugs: lowercase letters, digits and single dashes
    - Colours are #RGB/#RRGGBB hex strings
    - SMTP password is write-only: responses expose only has_smtp_password

Design Decisions:
    - ProjectUpdate is fully optional: PATCH semantics via model_dump(exclude_unset=True)
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator, model_validator

from photobooth.core.domain_types import PhotoboothType, StyleGender, WatermarkPosition
from photobooth.schemas.common import (
    HEX_COLOR_PATTERN, ORMModel, WriteModel, normalize_email,
)

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class ProjectCreate(WriteModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)
    description: str | None = Field(None, max_length=5000)
    home_message: str | None = Field(None, max_length=2000)
    event_date: date | None = None
    is_active: bool = True
    photobooth_type: PhotoboothType = PhotoboothType.STANDARD
    primary_color: str = Field("#811A53", pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field("#E5B7A5", pattern=HEX_COLOR_PATTERN)
    logo_url: str | None = Field(None, max_length=2000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ProjectUpdate(WriteModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)
    description: str | None = Field(None, max_length=5000)
    home_message: str | None = Field(None, max_length=2000)
    event_date: date | None = None
    is_active: bool | None = None
    photobooth_type: PhotoboothType | None = None
    primary_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    secondary_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    logo_url: str | None = Field(None, max_length=2000)

    watermark_enabled: bool | None = None
    watermark_text: str | None = Field(None, max_length=200)
    watermark_logo_url: str | None = Field(None, max_length=2000)
    watermark_position: WatermarkPosition | None = None
    watermark_text_position: WatermarkPosition | None = None
    watermark_text_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    watermark_text_size: int | None = Field(None, ge=6, le=400)
    watermark_opacity: float | None = Field(None, ge=0.0, le=1.0)

    email_from: EmailStr | None = None
    email_subject: str | None = Field(None, max_length=300)
    email_body: str | None = Field(None, max_length=10_000)
    email_smtp_host: str | None = Field(None, max_length=255)
    email_smtp_port: int | None = Field(None, ge=1, le=65535)
    email_smtp_secure: bool | None = None
    email_smtp_user: str | None = Field(None, max_length=255)
    email_smtp_password: str | None = Field(None, max_length=255)

    _lower_sender = field_validator("email_from", mode="before")(normalize_email)

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("name", "slug", "is_active", "photobooth_type",
                     "primary_color", "secondary_color"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ProjectSettingsPayload(WriteModel):
    default_gender: StyleGender = StyleGender.MALE
    show_countdown: bool = True
    max_processing_time: int = Field(60, ge=5, le=600)
    enable_qr_codes: bool = True
    enable_fullscreen: bool = True


class ProjectSettingsResponse(ProjectSettingsPayload, ORMModel):
    default_gender: str
    project_id: UUID


class ProjectSummary(ORMModel):
    id: UUID
    name: str
    slug: str
    is_active: bool
    photobooth_type: str
    event_date: date | None = None
    created_at: datetime


class ProjectResponse(ProjectSummary):
    description: str | None = None
    home_message: str | None = None
    primary_color: str
    secondary_color: str
    logo_url: str | None = None
    created_by: UUID | None = None
    updated_at: datetime

    watermark_enabled: bool
    watermark_text: str | None = None
    watermark_logo_url: str | None = None
    watermark_position: str
    watermark_text_position: str
    watermark_text_color: str
    watermark_text_size: int
    watermark_opacity: float
    watermark_elements: list = []

    email_from: str | None = None
    email_subject: str | None = None
    email_body: str | None = None
    email_smtp_host: str | None = None
    email_smtp_port: int | None = None
    email_smtp_secure: bool
    email_smtp_user: str | None = None
    has_smtp_password: bool = False

    @classmethod
    def from_project(cls, project) -> "ProjectResponse":
        response = cls.model_validate(project)
        response.has_smtp_password = bool(project.email_smtp_password)
        return response


class PublicProjectResponse(ORMModel):
    """What a booth (unauthenticated) sees about a project."""
    id: UUID
    name: str
    slug: str
    description: str | None = None
    home_message: str | None = None
    event_date: date | None = None
    photobooth_type: str
    primary_color: str
    secondary_color: str
    logo_url: str | None = None
    settings: ProjectSettingsPayload | None = None
