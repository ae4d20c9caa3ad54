"""Mosaic Schemas — live mosaic display settings and the public mosaic feed."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from photobooth.schemas.common import HEX_COLOR_PATTERN, ORMModel


class MosaicSettingsPayload(BaseModel):
    bg_color: str = Field("#000000", pattern=HEX_COLOR_PATTERN)
    bg_image_url: str = Field("", max_length=2000)
    title: str = Field("", max_length=300)
    description: str = Field("", max_length=2000)
    show_qr_code: bool = False
    qr_title: str = Field("Scannez-moi", max_length=200)
    qr_description: str = Field("", max_length=2000)
    qr_position: Literal[
        "center", "top-left", "top-right", "bottom-left", "bottom-right",
    ] = "center"


class MosaicSettingsResponse(MosaicSettingsPayload):
    project_id: UUID
    qr_position: str = "center"


class GalleryImage(ORMModel):
    id: UUID
    image_url: str
    created_at: datetime


class PublicMosaicResponse(BaseModel):
    project_name: str
    settings: MosaicSettingsResponse
    images: list[GalleryImage]
