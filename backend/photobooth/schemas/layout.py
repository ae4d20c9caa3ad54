"""Layout Schemas — layout templates and per-project canvas layouts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from photobooth.schemas.common import ORMModel


class TemplateUpsert(BaseModel):
    """Create when id is absent, update the caller's template otherwise."""
    id: UUID | None = None
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    layout_data: dict = Field(default_factory=dict)
    thumbnail_url: str | None = Field(None, max_length=2000)


class TemplateResponse(ORMModel):
    id: UUID
    name: str
    description: str | None = None
    layout_data: dict
    thumbnail_url: str | None = None
    created_at: datetime
    updated_at: datetime


class LayoutPayload(BaseModel):
    layout_data: dict


class LayoutResponse(BaseModel):
    project_id: UUID
    layout_data: dict | None = None
    updated_at: datetime | None = None
