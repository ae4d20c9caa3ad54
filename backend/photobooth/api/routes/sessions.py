"""Photo Session Routes — booths report captures, admins browse and moderate them."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_owned_project_or_404, require_admin
from photobooth.core.errors import ValidationFailedError
from photobooth.infrastructure.database import get_db
from photobooth.models import AdminUser, Project, Style
from photobooth.schemas.photo_session import (
    PhotoSessionPage, PhotoSessionResponse, SessionRecord,
)
from photobooth.services import gallery, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["sessions"])


@router.post(
    "/public/projects/{slug}/sessions",
    response_model=PhotoSessionResponse, status_code=status.HTTP_201_CREATED,
)
async def record_session(
    slug: str, body: SessionRecord, db: AsyncSession = Depends(get_db),
):
    project = await projects.get_public_project(db, slug)
    if body.style_id is not None:
        style = await db.scalar(
            select(Style.id).where(Style.id == body.style_id, Style.project_id == project.id),
        )
        if style is None:
            raise ValidationFailedError("Style does not belong to this project", "style_id")
    return await gallery.record_session(db, project.id, body.model_dump())


@router.get("/projects/{project_id}/sessions", response_model=PhotoSessionPage)
async def list_sessions(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    sessions, total = await gallery.list_sessions(db, project.id, limit, offset)
    return PhotoSessionPage(
        sessions=[PhotoSessionResponse.model_validate(s) for s in sessions],
        total=total, limit=limit, offset=offset,
    )


@router.post("/sessions/{session_id}/moderate", response_model=PhotoSessionResponse)
async def moderate_session(
    session_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    session = await gallery.get_owned_session(db, session_id, admin.id)
    return await gallery.set_session_moderation(db, session, True)


@router.post("/sessions/{session_id}/unmoderate", response_model=PhotoSessionResponse)
async def unmoderate_session(
    session_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    session = await gallery.get_owned_session(db, session_id, admin.id)
    return await gallery.set_session_moderation(db, session, False)
