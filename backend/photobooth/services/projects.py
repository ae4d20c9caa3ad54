"""Projects — tenant-scoped lookups, creation and 1:1 settings rows.

Invariants:
    - Admin lookups filter on created_by: another tenant's project is a 404, never a 403
    - Public lookups return active projects only
    - Slugs are unique: derived from the name when absent, suffixed -2, -3... on clash
      for derived slugs, ConflictError for explicit ones
    - Settings/mosaic rows are created lazily with defaults on first write
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.core.asset_naming import slugify
from photobooth.core.errors import ConflictError, ResourceNotFoundError
from photobooth.core.project_stats import compute_project_stats
from photobooth.models import MosaicSettings, PhotoSession, Project, ProjectSettings

logger = logging.getLogger(__name__)


async def get_owned_project(db: AsyncSession, project_id: UUID, admin_id: UUID) -> Project:
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.created_by == admin_id),
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise ResourceNotFoundError("Project", str(project_id))
    return project


async def get_public_project(db: AsyncSession, slug: str) -> Project:
    result = await db.execute(
        select(Project).where(Project.slug == slug, Project.is_active.is_(True)),
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise ResourceNotFoundError("Project", slug)
    return project


async def get_project(db: AsyncSession, project_id: UUID) -> Project:
    project = await db.get(Project, project_id)
    if project is None:
        raise ResourceNotFoundError("Project", str(project_id))
    return project


async def list_projects(db: AsyncSession, admin_id: UUID) -> list[Project]:
    result = await db.execute(
        select(Project)
        .where(Project.created_by == admin_id)
        .order_by(Project.created_at.desc()),
    )
    return list(result.scalars().all())


async def _slug_taken(db: AsyncSession, slug: str, exclude: UUID | None = None) -> bool:
    query = select(Project.id).where(Project.slug == slug)
    if exclude is not None:
        query = query.where(Project.id != exclude)
    return (await db.execute(query)).first() is not None


async def ensure_slug_available(db: AsyncSession, slug: str, exclude: UUID | None = None) -> None:
    if await _slug_taken(db, slug, exclude):
        raise ConflictError(f"Slug '{slug}' is already used by another project")


async def derive_slug(db: AsyncSession, name: str) -> str:
    base = slugify(name) or "projet"
    slug, n = base, 2
    while await _slug_taken(db, slug):
        slug, n = f"{base}-{n}", n + 1
    return slug


async def create_project(db: AsyncSession, admin_id: UUID, fields: dict) -> Project:
    if fields.get("slug"):
        await ensure_slug_available(db, fields["slug"])
    else:
        fields["slug"] = await derive_slug(db, fields["name"])
    project = Project(**fields, created_by=admin_id)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info("Project created", extra={"project_id": str(project.id), "admin_id": str(admin_id)})
    return project


async def update_project(db: AsyncSession, project: Project, changes: dict) -> Project:
    if changes.get("slug") and changes["slug"] != project.slug:
        await ensure_slug_available(db, changes["slug"], exclude=project.id)
    for name, value in changes.items():
        setattr(project, name, value)
    await db.commit()
    await db.refresh(project)
    return project


# ─── 1:1 rows ───────────────────────────────────────────────────

async def get_settings_row(db: AsyncSession, project_id: UUID) -> ProjectSettings | None:
    result = await db.execute(
        select(ProjectSettings).where(ProjectSettings.project_id == project_id),
    )
    return result.scalar_one_or_none()


async def upsert_settings(db: AsyncSession, project_id: UUID, values: dict) -> ProjectSettings:
    row = await get_settings_row(db, project_id)
    if row is None:
        row = ProjectSettings(project_id=project_id)
        db.add(row)
    for name, value in values.items():
        setattr(row, name, value)
    await db.commit()
    await db.refresh(row)
    return row


async def get_mosaic_row(db: AsyncSession, project_id: UUID) -> MosaicSettings | None:
    result = await db.execute(
        select(MosaicSettings).where(MosaicSettings.project_id == project_id),
    )
    return result.scalar_one_or_none()


async def upsert_mosaic(db: AsyncSession, project_id: UUID, values: dict) -> MosaicSettings:
    row = await get_mosaic_row(db, project_id)
    if row is None:
        row = MosaicSettings(project_id=project_id)
        db.add(row)
    for name, value in values.items():
        setattr(row, name, value)
    await db.commit()
    await db.refresh(row)
    return row


async def project_stats(db: AsyncSession, project_id: UUID) -> dict:
    result = await db.execute(
        select(PhotoSession).where(PhotoSession.project_id == project_id),
    )
    return compute_project_stats(result.scalars().all())
