"""Layout Routes — reusable layout templates and each project's canvas layout.

Invariants:
    - Templates are private to the admin who created them
    - POST /templates creates when no id is given, updates the caller's template otherwise
    - GET project layout answers {layout_data: null} when nothing was saved yet
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import (
    get_owned_project_or_404, get_storage, require_admin,
)
from photobooth.core import asset_naming
from photobooth.core.errors import ResourceNotFoundError
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import AdminUser, LayoutTemplate, Project, ProjectLayout
from photobooth.schemas.layout import (
    LayoutPayload, LayoutResponse, TemplateResponse, TemplateUpsert,
)
from photobooth.services import media_library

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["layouts"])


async def get_template_or_404(
    template_id: UUID, admin_id: UUID, db: AsyncSession,
) -> LayoutTemplate:
    result = await db.execute(
        select(LayoutTemplate).where(
            LayoutTemplate.id == template_id, LayoutTemplate.created_by == admin_id,
        ),
    )
    template = result.scalar_one_or_none()
    if not template:
        raise ResourceNotFoundError("Template", str(template_id))
    return template


@router.get("/templates", response_model=list[TemplateResponse])
async def list_templates(
    admin: AdminUser = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(LayoutTemplate)
        .where(LayoutTemplate.created_by == admin.id)
        .order_by(LayoutTemplate.updated_at.desc()),
    )
    return result.scalars().all()


@router.post("/templates", response_model=TemplateResponse)
async def upsert_template(
    body: TemplateUpsert,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    values = body.model_dump(exclude={"id"})
    if body.id is None:
        template = LayoutTemplate(created_by=admin.id, **values)
        db.add(template)
        created = True
    else:
        template = await get_template_or_404(body.id, admin.id, db)
        for name, value in values.items():
            setattr(template, name, value)
        created = False
    await db.commit()
    await db.refresh(template)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=TemplateResponse.model_validate(template).model_dump(mode="json"),
    )


@router.get("/templates/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await get_template_or_404(template_id, admin.id, db)


@router.delete("/templates/{template_id}")
async def delete_template(
    template_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    template = await get_template_or_404(template_id, admin.id, db)
    await db.delete(template)
    await db.commit()
    return {"deleted": True}


@router.post("/templates/{template_id}/thumbnail", response_model=TemplateResponse)
async def upload_template_thumbnail(
    template_id: UUID,
    file: UploadFile = File(...),
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    template = await get_template_or_404(template_id, admin.id, db)
    data = await file.read()
    media_library.check_upload(data, file.content_type)
    filename = f"{template.id}.{asset_naming.extension_for(file.content_type, 'png')}"
    template.thumbnail_url = await storage.put(
        f"templates/{filename}", data, file.content_type,
    )
    await db.commit()
    await db.refresh(template)
    return template


# ─── Project canvas layout ──────────────────────────────────────

async def _project_layout(db: AsyncSession, project_id: UUID) -> ProjectLayout | None:
    result = await db.execute(
        select(ProjectLayout).where(ProjectLayout.project_id == project_id),
    )
    return result.scalar_one_or_none()


@router.get("/projects/{project_id}/layout", response_model=LayoutResponse)
async def get_project_layout(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    layout = await _project_layout(db, project.id)
    if layout is None:
        return LayoutResponse(project_id=project.id)
    return LayoutResponse(
        project_id=project.id, layout_data=layout.layout_data, updated_at=layout.updated_at,
    )


@router.put("/projects/{project_id}/layout", response_model=LayoutResponse)
async def put_project_layout(
    body: LayoutPayload,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    layout = await _project_layout(db, project.id)
    if layout is None:
        layout = ProjectLayout(project_id=project.id)
        db.add(layout)
    layout.layout_data = body.layout_data
    await db.commit()
    await db.refresh(layout)
    return LayoutResponse(
        project_id=project.id, layout_data=layout.layout_data, updated_at=layout.updated_at,
    )
