"""Watermark Routes — editor elements, on-demand watermarking and watermarked image views.

Invariants:
    - Saving elements sets watermark_enabled = (at least one element)
    - /watermark/apply answers {watermarked: false, url} when the project has nothing to apply
    - /images/{id}/view streams the watermarked JPEG, or redirects (307) to the original
      when watermarking is disabled or rendering fails
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_fetcher, get_owned_project_or_404, get_storage
from photobooth.core.errors import (
    ExternalServiceError, MediaProcessingError, ValidationFailedError,
)
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import Project
from photobooth.schemas.watermark import (
    WatermarkApplyRequest, WatermarkApplyResponse, WatermarkElementsPayload,
    WatermarkElementsResponse,
)
from photobooth.services import gallery, projects, watermarking

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["watermark"])


@router.get(
    "/projects/{project_id}/watermark-elements", response_model=WatermarkElementsResponse,
)
async def get_watermark_elements(project: Project = Depends(get_owned_project_or_404)):
    return WatermarkElementsResponse(
        elements=project.watermark_elements or [],
        enabled=project.watermark_enabled,
        project_name=project.name,
    )


@router.put(
    "/projects/{project_id}/watermark-elements", response_model=WatermarkElementsResponse,
)
async def put_watermark_elements(
    body: WatermarkElementsPayload,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    elements = [e.model_dump(exclude_none=True) for e in body.elements]
    project.watermark_elements = elements
    project.watermark_enabled = len(elements) > 0
    await db.commit()
    await db.refresh(project)
    logger.info(
        f"Saved {len(elements)} watermark elements",
        extra={"project_id": str(project.id)},
    )
    return WatermarkElementsResponse(
        elements=project.watermark_elements,
        enabled=project.watermark_enabled,
        project_name=project.name,
    )


@router.post("/watermark/apply", response_model=WatermarkApplyResponse)
async def apply_watermark(
    body: WatermarkApplyRequest,
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
):
    project = await projects.get_project(db, body.project_id)
    return await watermarking.apply_watermark(project, body.image_url, fetcher, storage)


@router.get("/images/{image_id}/view")
async def view_image(
    image_id: UUID,
    db: AsyncSession = Depends(get_db),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
):
    image = await gallery.get_image(db, image_id)
    project = await projects.get_project(db, image.project_id)
    if not project.watermark_enabled:
        return RedirectResponse(image.image_url)
    try:
        data, _ = await fetcher.fetch(image.image_url)
        result = await watermarking.watermark_project_image(project, data, fetcher)
    except (ExternalServiceError, MediaProcessingError, ValidationFailedError) as e:
        logger.warning(
            f"Serving original image {image_id}: {e.message}",
            extra={"project_id": str(project.id)},
        )
        return RedirectResponse(image.image_url)
    return Response(
        content=result.data,
        media_type="image/jpeg",
        headers={"Cache-Control": "public, max-age=3600"},
    )
