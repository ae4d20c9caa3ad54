"""Media Library — uploads, project backgrounds and the built-in asset catalog.

Invariants:
    - Uploaded names pass through asset_naming.safe_filename (unique token appended)
    - Deleting a background removes the row even when the storage delete fails;
      storage failures are reported back, not raised
    - Only objects this app wrote (storage_path set, or URL recognised by the
      adapter) are deleted from storage
    - Catalog entries are read from the asset directory, sorted by file name
"""

import asyncio
import logging
import uuid
from pathlib import Path
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.core import asset_naming
from photobooth.core.domain_types import MediaKind
from photobooth.core.errors import StorageError, ValidationFailedError
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import Background

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 50 * 1024 * 1024


def _token() -> str:
    return uuid.uuid4().hex[:12]


def check_upload(data: bytes, content_type: str | None, kinds=(MediaKind.IMAGE,)) -> None:
    if not data:
        raise ValidationFailedError("Uploaded file is empty", "file")
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationFailedError("Uploaded file is too large", "file")
    if MediaKind.from_content_type(content_type) not in kinds:
        allowed = " or ".join(k.value for k in kinds)
        raise ValidationFailedError(f"Expected an {allowed} file", "file")


async def upload(
    storage: ObjectStorage, data: bytes, filename: str | None, content_type: str,
) -> tuple[str, str]:
    """Store a generic upload under uploads/; returns (key, url)."""
    key = asset_naming.upload_key(asset_naming.safe_filename(filename, _token(), content_type))
    return key, await storage.put(key, data, content_type)


async def store_project_asset(
    storage: ObjectStorage,
    project_id: UUID,
    folder: str,
    data: bytes,
    filename: str | None,
    content_type: str,
) -> tuple[str, str]:
    name = asset_naming.safe_filename(filename, _token(), content_type)
    key = asset_naming.project_key(project_id, folder, name)
    return key, await storage.put(key, data, content_type)


async def delete_stored(storage: ObjectStorage, storage_path: str | None, url: str | None) -> str | None:
    """Delete the object behind a row; returns an error message instead of raising."""
    key = storage_path or (storage.key_from_url(url) if url else None)
    if not key:
        return None
    try:
        await storage.delete(key)
    except StorageError as e:
        logger.warning(f"Storage delete failed for {key}: {e.message}", extra={"storage_key": key})
        return e.message
    return None


# ─── Backgrounds ────────────────────────────────────────────────

async def list_backgrounds(
    db: AsyncSession, project_id: UUID, active_only: bool = False,
) -> list[Background]:
    query = select(Background).where(Background.project_id == project_id)
    if active_only:
        query = query.where(Background.is_active.is_(True))
    result = await db.execute(query.order_by(Background.created_at))
    return list(result.scalars().all())


async def add_background(
    db: AsyncSession,
    project_id: UUID,
    name: str,
    image_url: str,
    storage_path: str | None = None,
    is_active: bool = True,
) -> Background:
    background = Background(
        project_id=project_id, name=name, image_url=image_url,
        storage_path=storage_path, is_active=is_active,
    )
    db.add(background)
    await db.commit()
    await db.refresh(background)
    return background


async def delete_backgrounds(
    db: AsyncSession, storage: ObjectStorage, backgrounds: list[Background],
) -> dict:
    storage_deleted, errors = 0, []
    for background in backgrounds:
        had_object = bool(background.storage_path or storage.key_from_url(background.image_url))
        error = await delete_stored(storage, background.storage_path, background.image_url)
        if error:
            errors.append(f"{background.name}: {error}")
        elif had_object:
            storage_deleted += 1
        await db.delete(background)
    await db.commit()
    return {
        "deleted": len(backgrounds),
        "storage_deleted": storage_deleted,
        "storage_errors": errors,
    }


# ─── Asset catalog ──────────────────────────────────────────────

def _scan_catalog(directory: str) -> list[str]:
    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_file())


async def catalog_backgrounds(directory: str, base_url: str) -> list[dict]:
    entries = []
    for filename in await asyncio.to_thread(_scan_catalog, directory):
        label = asset_naming.background_label(filename)
        if label:
            entries.append({
                "name": label, "filename": filename,
                "url": f"{base_url.rstrip('/')}/{filename}",
            })
    return entries


async def catalog_fresque_themes(directory: str, base_url: str) -> list[dict]:
    return [
        {
            "name": Path(filename).stem, "filename": filename,
            "url": f"{base_url.rstrip('/')}/{filename}",
        }
        for filename in await asyncio.to_thread(_scan_catalog, directory)
        if asset_naming.is_fresque_theme(filename)
    ]
