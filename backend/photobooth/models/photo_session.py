"""PhotoSession ORM — one capture → AI generation attempt at a booth.

Invariants:
    - project_id / style_id nullable: historical sessions survive style deletion
    - is_success=False rows carry error_message; processing_time_ms always measured
    - moderation is None (visible) or MODERATED_FLAG "M" (hidden from galleries)

Design Decisions:
    - Table keeps the historical name "sessions": admin dashboards and exports query it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from photobooth.db.base import Base


class PhotoSession(Base):
    __tablename__ = "sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    style_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("styles.id", ondelete="SET NULL"),
        nullable=True,
    )
    gender: Mapped[str | None] = mapped_column(String(5), nullable=True)
    user_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    result_image_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    result_s3_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    watermarked_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    processing_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    moderation: Mapped[str | None] = mapped_column(String(1), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
