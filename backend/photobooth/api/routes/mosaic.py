"""Mosaic Routes — live photo mosaic settings and the public mosaic feed.

Invariants:
    - Settings GET falls back to defaults (#000000 background, "Scannez-moi" QR title)
    - The public feed lists non-moderated images of an active project, newest first
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_owned_project_or_404
from photobooth.infrastructure.database import get_db
from photobooth.models import Project
from photobooth.schemas.mosaic import (
    MosaicSettingsPayload, MosaicSettingsResponse, PublicMosaicResponse,
)
from photobooth.services import gallery, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["mosaic"])


async def _mosaic_settings(db: AsyncSession, project: Project) -> MosaicSettingsResponse:
    row = await projects.get_mosaic_row(db, project.id)
    if row is None:
        return MosaicSettingsResponse(project_id=project.id)
    return MosaicSettingsResponse.model_validate(row, from_attributes=True)


@router.get("/projects/{project_id}/mosaic-settings", response_model=MosaicSettingsResponse)
async def get_mosaic_settings(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    return await _mosaic_settings(db, project)


@router.put("/projects/{project_id}/mosaic-settings", response_model=MosaicSettingsResponse)
async def put_mosaic_settings(
    body: MosaicSettingsPayload,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    row = await projects.upsert_mosaic(db, project.id, body.model_dump())
    return MosaicSettingsResponse.model_validate(row, from_attributes=True)


@router.get("/public/projects/{slug}/mosaic", response_model=PublicMosaicResponse)
async def get_public_mosaic(
    slug: str,
    limit: int = Query(200, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    project = await projects.get_public_project(db, slug)
    return PublicMosaicResponse(
        project_name=project.name,
        settings=await _mosaic_settings(db, project),
        images=await gallery.visible_images(db, project.id, limit),
    )
