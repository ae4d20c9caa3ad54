"""Background Schemas — project backdrops and the built-in asset catalog."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from photobooth.schemas.common import ORMModel


class BackgroundCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    image_url: str = Field(min_length=1, max_length=2000)
    is_active: bool = True


class BackgroundFromUrl(BaseModel):
    """Copy a remote image into storage and register it as a background."""
    url: str = Field(min_length=1, max_length=2000, pattern=r"^https?://")
    name: str | None = Field(None, max_length=200)


class BackgroundResponse(ORMModel):
    id: UUID
    project_id: UUID
    name: str
    image_url: str
    is_active: bool
    created_at: datetime


class BackgroundDeleteResponse(BaseModel):
    deleted: int
    storage_deleted: int
    storage_errors: list[str] = []


class CatalogEntry(BaseModel):
    name: str
    filename: str
    url: str
