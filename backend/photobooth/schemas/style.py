"""Style Schemas — AI preset payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from photobooth.core.domain_types import StyleGender
from photobooth.schemas.common import ORMModel, WriteModel


class StyleCreate(WriteModel):
    name: str = Field(min_length=1, max_length=200)
    gender: StyleGender = StyleGender.MALE
    style_key: str = Field(min_length=1, max_length=100)
    prompt: str | None = Field(None, max_length=4000)
    variations: int = Field(1, ge=1, le=10)
    description: str | None = Field(None, max_length=2000)
    preview_image: str | None = Field(None, max_length=2000)
    is_active: bool = True


class StyleUpdate(WriteModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    gender: StyleGender | None = None
    style_key: str | None = Field(None, min_length=1, max_length=100)
    prompt: str | None = Field(None, max_length=4000)
    variations: int | None = Field(None, ge=1, le=10)
    description: str | None = Field(None, max_length=2000)
    preview_image: str | None = Field(None, max_length=2000)
    is_active: bool | None = None


class StyleResponse(ORMModel):
    id: UUID
    project_id: UUID
    name: str
    gender: str
    style_key: str
    prompt: str | None = None
    variations: int
    description: str | None = None
    preview_image: str | None = None
    is_active: bool
    created_at: datetime
