"""Gallery — photo sessions, shared images, moderation and public feeds.

Invariants:
    - Public feeds (gallery, mosaic) never include moderated images
    - Session moderation is a flag ("M"), never a delete: stats keep counting it
    - Listings are newest first
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.core.domain_types import MODERATED_FLAG
from photobooth.core.errors import ResourceNotFoundError
from photobooth.models import PhotoSession, Project, ProjectImage

logger = logging.getLogger(__name__)


# ─── Photo sessions ─────────────────────────────────────────────

async def record_session(db: AsyncSession, project_id: UUID, fields: dict) -> PhotoSession:
    session = PhotoSession(project_id=project_id, **fields)
    db.add(session)
    await db.commit()
    await db.refresh(session)
    return session


async def list_sessions(
    db: AsyncSession, project_id: UUID, limit: int, offset: int,
) -> tuple[list[PhotoSession], int]:
    total = await db.scalar(
        select(func.count()).select_from(PhotoSession)
        .where(PhotoSession.project_id == project_id),
    )
    result = await db.execute(
        select(PhotoSession)
        .where(PhotoSession.project_id == project_id)
        .order_by(PhotoSession.created_at.desc())
        .limit(limit).offset(offset),
    )
    return list(result.scalars().all()), total or 0


async def get_owned_session(db: AsyncSession, session_id: UUID, admin_id: UUID) -> PhotoSession:
    result = await db.execute(
        select(PhotoSession)
        .join(Project, Project.id == PhotoSession.project_id)
        .where(PhotoSession.id == session_id, Project.created_by == admin_id),
    )
    session = result.scalar_one_or_none()
    if session is None:
        raise ResourceNotFoundError("Session", str(session_id))
    return session


async def set_session_moderation(
    db: AsyncSession, session: PhotoSession, moderated: bool,
) -> PhotoSession:
    session.moderation = MODERATED_FLAG if moderated else None
    await db.commit()
    await db.refresh(session)
    logger.info(
        f"Session {session.id} {'moderated' if moderated else 'restored'}",
        extra={"project_id": str(session.project_id)},
    )
    return session


# ─── Shared images ──────────────────────────────────────────────

async def save_shared_image(
    db: AsyncSession,
    project: Project,
    image_url: str,
    file_name: str | None = None,
    original_url: str | None = None,
    watermarked_url: str | None = None,
    storage_path: str | None = None,
) -> ProjectImage:
    image = ProjectImage(
        project_id=project.id,
        image_url=image_url,
        storage_path=storage_path,
        image_metadata={
            "file_name": file_name,
            "project_slug": project.slug,
            "original_url": original_url or image_url,
            "watermarked_url": watermarked_url,
        },
    )
    db.add(image)
    await db.commit()
    await db.refresh(image)
    return image


async def visible_images(db: AsyncSession, project_id: UUID, limit: int = 200) -> list[ProjectImage]:
    result = await db.execute(
        select(ProjectImage)
        .where(ProjectImage.project_id == project_id, ProjectImage.is_moderated.is_(False))
        .order_by(ProjectImage.created_at.desc())
        .limit(limit),
    )
    return list(result.scalars().all())


async def get_image(db: AsyncSession, image_id: UUID) -> ProjectImage:
    image = await db.get(ProjectImage, image_id)
    if image is None:
        raise ResourceNotFoundError("Image", str(image_id))
    return image


async def get_owned_image(db: AsyncSession, image_id: UUID, admin_id: UUID) -> ProjectImage:
    result = await db.execute(
        select(ProjectImage)
        .join(Project, Project.id == ProjectImage.project_id)
        .where(ProjectImage.id == image_id, Project.created_by == admin_id),
    )
    image = result.scalar_one_or_none()
    if image is None:
        raise ResourceNotFoundError("Image", str(image_id))
    return image


async def moderate_image(db: AsyncSession, image: ProjectImage) -> ProjectImage:
    image.is_moderated = True
    await db.commit()
    await db.refresh(image)
    return image
