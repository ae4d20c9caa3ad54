"""ProjectSettings ORM — capture-flow switches, one row per project (lazily created)."""

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from photobooth.db.base import Base


class ProjectSettings(Base):
    __tablename__ = "project_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    default_gender: Mapped[str] = mapped_column(String(5), nullable=False, default="m")
    show_countdown: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_processing_time: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    enable_qr_codes: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enable_fullscreen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

