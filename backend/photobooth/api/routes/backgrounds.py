"""Background Routes — project backdrops and the shipped asset catalog.

Invariants:
    - Uploads and from-url copies land under projects/{id}/backgrounds/
    - Deleting reports storage failures in the body instead of failing the request
    - Catalog listings are public and read-only
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import (
    get_fetcher, get_owned_project_or_404, get_storage, require_admin,
)
from photobooth.config import Settings, get_settings
from photobooth.core.errors import ResourceNotFoundError
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import AdminUser, Background, Project
from photobooth.schemas.background import (
    BackgroundCreate, BackgroundDeleteResponse, BackgroundFromUrl, BackgroundResponse,
    CatalogEntry,
)
from photobooth.services import media_library, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["backgrounds"])


@router.get("/projects/{project_id}/backgrounds", response_model=list[BackgroundResponse])
async def list_backgrounds(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    return await media_library.list_backgrounds(db, project.id)


@router.post(
    "/projects/{project_id}/backgrounds",
    response_model=BackgroundResponse, status_code=status.HTTP_201_CREATED,
)
async def add_background(
    body: BackgroundCreate,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Register an already hosted image (e.g. a catalog entry) as a background."""
    return await media_library.add_background(
        db, project.id, body.name, body.image_url, is_active=body.is_active,
    )


@router.post(
    "/projects/{project_id}/backgrounds/upload",
    response_model=BackgroundResponse, status_code=status.HTTP_201_CREATED,
)
async def upload_background(
    file: UploadFile = File(...),
    name: str | None = Form(None),
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    data = await file.read()
    media_library.check_upload(data, file.content_type)
    key, url = await media_library.store_project_asset(
        storage, project.id, "backgrounds", data, file.filename, file.content_type,
    )
    return await media_library.add_background(
        db, project.id, name or file.filename or "Fond", url, storage_path=key,
    )


@router.post(
    "/projects/{project_id}/backgrounds/from-url",
    response_model=BackgroundResponse, status_code=status.HTTP_201_CREATED,
)
async def add_background_from_url(
    body: BackgroundFromUrl,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
):
    """Copy a remote image into storage, then register it."""
    data, content_type = await fetcher.fetch(body.url)
    media_library.check_upload(data, content_type)
    filename = body.url.rsplit("/", 1)[-1].split("?", 1)[0]
    key, url = await media_library.store_project_asset(
        storage, project.id, "backgrounds", data, filename, content_type,
    )
    return await media_library.add_background(
        db, project.id, body.name or filename or "Fond", url, storage_path=key,
    )


@router.delete("/backgrounds/{background_id}", response_model=BackgroundDeleteResponse)
async def delete_background(
    background_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    result = await db.execute(
        select(Background)
        .join(Project, Project.id == Background.project_id)
        .where(Background.id == background_id, Project.created_by == admin.id),
    )
    background = result.scalar_one_or_none()
    if not background:
        raise ResourceNotFoundError("Background", str(background_id))
    return await media_library.delete_backgrounds(db, storage, [background])


@router.delete("/projects/{project_id}/backgrounds", response_model=BackgroundDeleteResponse)
async def delete_project_backgrounds(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    backgrounds = await media_library.list_backgrounds(db, project.id)
    return await media_library.delete_backgrounds(db, storage, backgrounds)


@router.get("/public/projects/{slug}/backgrounds", response_model=list[BackgroundResponse])
async def list_public_backgrounds(slug: str, db: AsyncSession = Depends(get_db)):
    project = await projects.get_public_project(db, slug)
    return await media_library.list_backgrounds(db, project.id, active_only=True)


@router.get("/catalog/backgrounds", response_model=list[CatalogEntry])
async def catalog_backgrounds(settings: Settings = Depends(get_settings)):
    return await media_library.catalog_backgrounds(
        settings.asset_catalog_dir, settings.asset_catalog_url,
    )


@router.get("/catalog/fresque-themes", response_model=list[CatalogEntry])
async def catalog_fresque_themes(settings: Settings = Depends(get_settings)):
    return await media_library.catalog_fresque_themes(
        settings.asset_catalog_dir, settings.asset_catalog_url,
    )
