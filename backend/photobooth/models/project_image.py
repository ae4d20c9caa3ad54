"""ProjectImage ORM — a shared/stored output image shown in galleries and mosaics.

Invariants:
    - image_metadata column is named "metadata" in SQL ("metadata" is reserved on
      declarative classes)
    - is_moderated=True hides the image from public gallery and mosaic
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, JSON, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from photobooth.db.base import Base


class ProjectImage(Base):
    __tablename__ = "project_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    image_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    storage_path: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_moderated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_metadata: Mapped[dict] = mapped_column(
        "metadata", JSON, nullable=False, default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
