"""Generation Schemas — Replicate/fal.ai request and result payloads.

Invariants:
    - ReplicateRunRequest.input is typed Any on purpose: core/generation_rules reports
      "input must be an object" with the same envelope as other domain rules
    - Booth images are http(s) URLs or data:image/ URIs
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from photobooth.schemas.common import ORMModel, normalize_email


def _check_image_ref(v: str) -> str:
    if not v.startswith(("http://", "https://", "data:image/")):
        raise ValueError("image must be an http(s) URL or a data:image/ URI")
    return v


class ReplicateRunRequest(BaseModel):
    model: str | None = None
    input: Any = None


class ReplicateRunResponse(BaseModel):
    model: str
    output: list[str]


class PredictionCreate(BaseModel):
    model: str = Field(min_length=1, max_length=200)
    input: dict = Field(default_factory=dict)
    version: str | None = Field(None, max_length=100)
    project_id: UUID | None = None


class PredictionResponse(ORMModel):
    id: UUID
    provider: str
    model: str
    external_id: str | None = None
    prompt: str | None = None
    status: str
    output: list = []
    error: str | None = None
    created_at: datetime
    updated_at: datetime


class GenerateImageRequest(BaseModel):
    prompt: str = Field(min_length=1, max_length=4000)
    aspect_ratio: str = Field("1:1", pattern=r"^\d{1,2}:\d{1,2}$")
    project_id: UUID | None = None


class BoothGenerationRequest(BaseModel):
    """A guest's captured face to run through a project style."""
    project_slug: str = Field(min_length=1, max_length=120)
    style_id: UUID
    image: str = Field(min_length=1)
    user_email: EmailStr | None = None

    _check_image = field_validator("image")(_check_image_ref)
    _lower_email = field_validator("user_email", mode="before")(normalize_email)


class BoothGenerationResponse(BaseModel):
    session_id: UUID
    image_url: str
    processing_time_ms: int


class BackgroundRemovalResponse(BaseModel):
    url: str
    kind: str
