"""Watermark Schemas — editor elements and watermark application payloads.

Invariants:
    - Element coordinates are expressed on the 800x1200 editor canvas
    - At most 50 elements per project; opacity within 0-1
    - Unknown element keys are preserved (the editor stores its own extras)
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WatermarkElement(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: Literal["text", "image", "logo"]
    x: float = 0
    y: float = 0
    text: str | None = Field(None, max_length=500)
    fontSize: float | None = Field(None, gt=0, le=1000)
    fontFamily: str | None = None
    fill: str | None = None
    src: str | None = None
    width: float | None = Field(None, gt=0)
    height: float | None = Field(None, gt=0)
    opacity: float = Field(1.0, ge=0.0, le=1.0)
    rotation: float = 0

    @model_validator(mode="after")
    def check_content(self):
        if self.type == "text" and not self.text:
            raise ValueError("text elements require text")
        if self.type in ("image", "logo") and not self.src:
            raise ValueError("image elements require src")
        return self


class WatermarkElementsPayload(BaseModel):
    elements: list[WatermarkElement] = Field(default_factory=list, max_length=50)


class WatermarkElementsResponse(BaseModel):
    elements: list[dict]
    enabled: bool
    project_name: str


class WatermarkApplyRequest(BaseModel):
    image_url: str = Field(min_length=1, max_length=2000)
    project_id: UUID


class WatermarkApplyResponse(BaseModel):
    watermarked: bool
    url: str
    original_url: str
    text_applied: bool = False
    logo_applied: bool = False
    elements_applied: int = 0
    message: str | None = None
