"""Project Routes — admin CRUD, capture settings, stats and the public booth lookup.

Invariants:
    - Admin routes only ever see the caller's projects (404 otherwise)
    - DELETE answers 202 and removes the project in a background task with bounded retry
    - Settings GET returns defaults when no row exists yet; PUT upserts
    - The public lookup exposes branding and capture settings only (no SMTP, no watermark)
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_owned_project_or_404, require_admin
from photobooth.infrastructure.database import get_db
from photobooth.models import AdminUser, Project
from photobooth.schemas.project import (
    ProjectCreate, ProjectResponse, ProjectSettingsPayload, ProjectSettingsResponse,
    ProjectSummary, ProjectUpdate, PublicProjectResponse,
)
from photobooth.services import project_deletion, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["projects"])


@router.get("/projects", response_model=list[ProjectSummary])
async def list_projects(
    admin: AdminUser = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    return await projects.list_projects(db, admin.id)


@router.post(
    "/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    project = await projects.create_project(db, admin.id, body.model_dump())
    return ProjectResponse.from_project(project)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project: Project = Depends(get_owned_project_or_404)):
    return ProjectResponse.from_project(project)


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
async def update_project(
    body: ProjectUpdate,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    project = await projects.update_project(db, project, body.model_dump(exclude_unset=True))
    return ProjectResponse.from_project(project)


@router.delete("/projects/{project_id}", status_code=status.HTTP_202_ACCEPTED)
async def delete_project(
    background_tasks: BackgroundTasks,
    project: Project = Depends(get_owned_project_or_404),
):
    """Accept deletion; rows are removed in the background."""
    background_tasks.add_task(project_deletion.delete_project_with_retry, project.id)
    return {"message": "Project deletion scheduled", "project_id": str(project.id)}


@router.get("/projects/{project_id}/settings", response_model=ProjectSettingsResponse)
async def get_project_settings(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    row = await projects.get_settings_row(db, project.id)
    if row is None:
        return ProjectSettingsResponse(
            project_id=project.id, **ProjectSettingsPayload().model_dump(mode="json"),
        )
    return row


@router.put("/projects/{project_id}/settings", response_model=ProjectSettingsResponse)
async def put_project_settings(
    body: ProjectSettingsPayload,
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    return await projects.upsert_settings(db, project.id, body.model_dump(mode="json"))


@router.get("/projects/{project_id}/stats")
async def get_project_stats(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    return {"project_id": str(project.id), **await projects.project_stats(db, project.id)}


@router.get("/public/projects/{slug}", response_model=PublicProjectResponse)
async def get_public_project(slug: str, db: AsyncSession = Depends(get_db)):
    project = await projects.get_public_project(db, slug)
    response = PublicProjectResponse.model_validate(project)
    row = await projects.get_settings_row(db, project.id)
    response.settings = (
        ProjectSettingsPayload.model_validate(row, from_attributes=True)
        if row else ProjectSettingsPayload()
    )
    return response
