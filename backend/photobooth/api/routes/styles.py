"""Style Routes — AI presets of a project (admin CRUD, preview upload, public listing).

Invariants:
    - Styles are reached through their project's owner: another tenant's style is a 404
    - Uploading a new preview replaces (and deletes) the previously uploaded one
    - The public listing returns active styles only, optionally filtered by gender
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import (
    get_owned_project_or_404, get_storage, require_admin,
)
from photobooth.core.domain_types import StyleGender
from photobooth.core.errors import ResourceNotFoundError
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import AdminUser, Project, Style
from photobooth.schemas.style import StyleCreate, StyleResponse, StyleUpdate
from photobooth.services import media_library, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["styles"])


async def get_owned_style_or_404(
    style_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Style:
    result = await db.execute(
        select(Style)
        .join(Project, Project.id == Style.project_id)
        .where(Style.id == style_id, Project.created_by == admin.id),
    )
    style = result.scalar_one_or_none()
    if not style:
        raise ResourceNotFoundError("Style", str(style_id))
    return style


@router.get("/projects/{project_id}/styles", response_model=list[StyleResponse])
async def list_styles(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Style).where(Style.project_id == project.id).order_by(Style.created_at),
    )
    return result.scalars().all()


@router.post(
    "/projects/{project_id}/styles",
    response_model=StyleResponse, status_code=status.HTTP_201_CREATED,
)
async def create_style(
    body: StyleCreate,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    style = Style(project_id=project.id, **body.model_dump())
    db.add(style)
    await db.commit()
    await db.refresh(style)
    return style


@router.patch("/styles/{style_id}", response_model=StyleResponse)
async def update_style(
    body: StyleUpdate,
    style: Style = Depends(get_owned_style_or_404),
    db: AsyncSession = Depends(get_db),
):
    for name, value in body.model_dump(exclude_unset=True).items():
        setattr(style, name, value)
    await db.commit()
    await db.refresh(style)
    return style


@router.delete("/styles/{style_id}")
async def delete_style(
    style: Style = Depends(get_owned_style_or_404),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    storage_error = await media_library.delete_stored(storage, style.storage_path, None)
    await db.delete(style)
    await db.commit()
    return {"deleted": True, "storage_error": storage_error}


@router.post("/styles/{style_id}/preview", response_model=StyleResponse)
async def upload_style_preview(
    file: UploadFile = File(...),
    style: Style = Depends(get_owned_style_or_404),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    data = await file.read()
    media_library.check_upload(data, file.content_type)
    key, url = await media_library.store_project_asset(
        storage, style.project_id, "styles", data, file.filename, file.content_type,
    )
    previous = style.storage_path
    style.preview_image, style.storage_path = url, key
    await db.commit()
    await db.refresh(style)
    if previous:
        await media_library.delete_stored(storage, previous, None)
    return style


@router.get("/public/projects/{slug}/styles", response_model=list[StyleResponse])
async def list_public_styles(
    slug: str,
    gender: StyleGender | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    project = await projects.get_public_project(db, slug)
    query = select(Style).where(Style.project_id == project.id, Style.is_active.is_(True))
    if gender is not None:
        query = query.where(Style.gender == gender.value)
    result = await db.execute(query.order_by(Style.created_at))
    return result.scalars().all()
