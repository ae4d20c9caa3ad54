"""Layout ORMs — reusable layout templates and the per-project canvas layout.

Invariants:
    - layout_data is the canvas document as saved by the editor:
      {"elements": [...], "stage_size": {"width", "height"}, ...} — stored verbatim
    - A project has at most one ProjectLayout (project_id unique)
    - LayoutTemplate.created_by scopes listing to the owning admin

Design Decisions:
    - JSON column over normalised element rows: the editor is the only reader/writer
      and always loads the whole document
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from photobooth.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class LayoutTemplate(Base):
    """Saved arrangement of canvas elements, reusable across projects."""
    __tablename__ = "templates"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    layout_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    thumbnail_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )


class ProjectLayout(Base):
    """The canvas layout currently applied to a project's print/gallery output."""
    __tablename__ = "layouts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    layout_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )
