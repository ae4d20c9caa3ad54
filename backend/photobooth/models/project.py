"""Project ORM — a tenant's configured photobooth instance (aggregate root).

Invariants:
    - slug is unique across tenants (public booth URL /{slug})
    - created_by owns the project; admin routes never expose other tenants' projects
    - watermark_enabled mirrors "has watermark elements" when elements are edited
      through the watermark editor (POST watermark-elements)

Design Decisions:
    - Watermark and email (SMTP) settings stored inline: always read together with
      the project, no JOIN needed on the capture path
    - Children (styles, backgrounds, sessions, ...) are deleted explicitly by
      services/project_deletion.py, not through ORM cascades, so the order and the
      retry behaviour stay visible in one place
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    Boolean, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from photobooth.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """Project aggregate root — owns styles, backgrounds, sessions and settings."""
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    home_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    photobooth_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="standard",
    )
    primary_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#811A53")
    secondary_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#E5B7A5")
    logo_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Watermark
    watermark_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    watermark_text: Mapped[str | None] = mapped_column(String(200), nullable=True)
    watermark_logo_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    watermark_position: Mapped[str] = mapped_column(
        String(20), nullable=False, default="bottom-right",
    )
    watermark_text_position: Mapped[str] = mapped_column(
        String(20), nullable=False, default="bottom-left",
    )
    watermark_text_color: Mapped[str] = mapped_column(
        String(20), nullable=False, default="#FFFFFF",
    )
    watermark_text_size: Mapped[int] = mapped_column(Integer, nullable=False, default=24)
    watermark_opacity: Mapped[float] = mapped_column(Float, nullable=False, default=0.8)
    watermark_elements: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Photo email delivery
    email_from: Mapped[str | None] = mapped_column(String(320), nullable=True)
    email_subject: Mapped[str | None] = mapped_column(String(300), nullable=True)
    email_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_smtp_host: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email_smtp_port: Mapped[int | None] = mapped_column(Integer, nullable=True)
    email_smtp_secure: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_smtp_user: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email_smtp_password: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )

