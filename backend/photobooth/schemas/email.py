"""Email Schemas — photo-by-email subscriptions."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from photobooth.schemas.common import ORMModel, normalize_email


class SubscriptionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    image_url: str = Field(min_length=1, max_length=2000)

    _lower_email = field_validator("email", mode="before")(normalize_email)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class SubscriptionResponse(ORMModel):
    id: UUID
    project_id: UUID
    name: str
    email: str
    image_url: str
    status: str
    error_message: str | None = None
    sent_at: datetime | None = None
    created_at: datetime
