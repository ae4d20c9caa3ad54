"""Sharing Schemas — shared images (gallery, QR download pages)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from photobooth.schemas.common import ORMModel


class SharedImageCreate(BaseModel):
    image_url: str = Field(min_length=1, max_length=2000, pattern=r"^https?://|^/")
    file_name: str | None = Field(None, max_length=300)
    original_url: str | None = Field(None, max_length=2000)
    watermarked_url: str | None = Field(None, max_length=2000)


class ProjectImageResponse(ORMModel):
    id: UUID
    project_id: UUID
    image_url: str
    is_moderated: bool
    image_metadata: dict = Field(default_factory=dict, serialization_alias="metadata")
    created_at: datetime


class StorageImage(BaseModel):
    key: str
    url: str
    size: int
    last_modified: datetime | None = None


class StorageImageListing(BaseModel):
    count: int
    images: list[StorageImage] | None = None


class UploadResponse(BaseModel):
    key: str
    url: str
    content_type: str
    size: int
