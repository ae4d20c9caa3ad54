"""MosaicSettings ORM — display settings of a project's live photo mosaic (1:1 with project)."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from photobooth.db.base import Base


class MosaicSettings(Base):
    __tablename__ = "mosaic_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    bg_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#000000")
    bg_image_url: Mapped[str] = mapped_column(String(2000), nullable=False, default="")
    title: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    show_qr_code: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    qr_title: Mapped[str] = mapped_column(String(200), nullable=False, default="Scannez-moi")
    qr_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    qr_position: Mapped[str] = mapped_column(String(20), nullable=False, default="center")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
