"""Sharing Routes — booths publish finished photos, guests browse the gallery."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.infrastructure.database import get_db
from photobooth.schemas.sharing import ProjectImageResponse, SharedImageCreate
from photobooth.services import gallery, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/public/projects", tags=["sharing"])


@router.post(
    "/{slug}/shared-images",
    response_model=ProjectImageResponse, status_code=status.HTTP_201_CREATED,
)
async def share_image(
    slug: str, body: SharedImageCreate, db: AsyncSession = Depends(get_db),
):
    project = await projects.get_public_project(db, slug)
    return await gallery.save_shared_image(
        db, project, body.image_url,
        file_name=body.file_name,
        original_url=body.original_url,
        watermarked_url=body.watermarked_url,
    )


@router.get("/{slug}/gallery", response_model=list[ProjectImageResponse])
async def public_gallery(
    slug: str,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    project = await projects.get_public_project(db, slug)
    return await gallery.visible_images(db, project.id, limit)
