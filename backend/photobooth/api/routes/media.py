"""Media Routes — generic uploads, the project storage browser and image moderation.

Invariants:
    - Uploads accept images and videos; names are sanitised and made unique
    - Storage listings are restricted to projects/{id}/ of an owned project
    - DELETE /media only deletes keys under a prefix the caller owns
      (projects/{owned id}/...) or generic uploads/
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_owned_project_or_404, get_storage, require_admin
from photobooth.core import asset_naming
from photobooth.core.domain_types import MediaKind
from photobooth.core.errors import ValidationFailedError
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import AdminUser, Project
from photobooth.schemas.sharing import (
    ProjectImageResponse, StorageImage, StorageImageListing, UploadResponse,
)
from photobooth.services import gallery, media_library, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["media"])


@router.post("/media/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(...),
    admin: AdminUser = Depends(require_admin),
    storage: ObjectStorage = Depends(get_storage),
):
    data = await file.read()
    media_library.check_upload(data, file.content_type, (MediaKind.IMAGE, MediaKind.VIDEO))
    key, url = await media_library.upload(storage, data, file.filename, file.content_type)
    return UploadResponse(key=key, url=url, content_type=file.content_type, size=len(data))


@router.get("/projects/{project_id}/storage-images", response_model=StorageImageListing)
async def list_storage_images(
    count_only: bool = Query(False),
    project: Project = Depends(get_owned_project_or_404),
    storage: ObjectStorage = Depends(get_storage),
):
    prefix = asset_naming.project_prefix(project.id)
    if count_only:
        return StorageImageListing(count=await storage.count(prefix))
    objects = await storage.list(prefix)
    return StorageImageListing(
        count=len(objects),
        images=[
            StorageImage(key=o.key, url=o.url, size=o.size, last_modified=o.last_modified)
            for o in sorted(
                objects, key=lambda o: o.last_modified.timestamp() if o.last_modified else 0,
                reverse=True,
            )
        ],
    )


async def _check_key_owner(db: AsyncSession, key: str, admin: AdminUser) -> None:
    parts = key.split("/")
    if parts[0] == "uploads" and len(parts) > 1:
        return
    if parts[0] == "projects" and len(parts) > 2:
        try:
            await projects.get_owned_project(db, UUID(parts[1]), admin.id)
            return
        except ValueError:
            pass
    raise ValidationFailedError("Key is outside the caller's storage area", "key")


@router.delete("/media")
async def delete_media(
    key: str = Query(..., min_length=1),
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    if not asset_naming.is_safe_key(key):
        raise ValidationFailedError("Invalid storage key", "key")
    await _check_key_owner(db, key, admin)
    await storage.delete(key)
    return {"deleted": True, "key": key}


@router.delete("/images/{image_id}")
async def delete_project_image(
    image_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    image = await gallery.get_owned_image(db, image_id, admin.id)
    storage_error = await media_library.delete_stored(storage, image.storage_path, image.image_url)
    await db.delete(image)
    await db.commit()
    return {"deleted": True, "storage_error": storage_error}


@router.post("/images/{image_id}/moderate", response_model=ProjectImageResponse)
async def moderate_image(
    image_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    image = await gallery.get_owned_image(db, image_id, admin.id)
    return await gallery.moderate_image(db, image)
