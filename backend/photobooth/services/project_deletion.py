"""Project Deletion — removes a project and everything it owns, with bounded retry.

Invariants:
    - Children deleted before the project, in a fixed order: sessions, styles,
      backgrounds, settings, layout, mosaic settings, images, subscriptions,
      predictions
    - One transaction per attempt: a failed attempt leaves nothing half-deleted
    - At most DELETE_ATTEMPTS attempts, RETRY_DELAY_S apart, retried only on
      DatabaseError; the last error is logged, never raised (runs as a background task)

Design Decisions:
    - Explicit deletes over ORM cascades: sqlite (tests) does not enforce FK cascades
      and the order stays readable in one place
    - Storage objects are left in place: generated images may still be linked from
      guests' emails and QR pages
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.core.errors import DatabaseError
from photobooth.infrastructure import database
from photobooth.models import (
    Background, EmailSubscription, MosaicSettings, PhotoSession, Prediction, Project,
    ProjectImage, ProjectLayout, ProjectSettings, Style,
)

logger = logging.getLogger(__name__)

DELETE_ATTEMPTS = 3
RETRY_DELAY_S = 0.5

_CHILD_MODELS = (
    PhotoSession, Style, Background, ProjectSettings, ProjectLayout,
    MosaicSettings, ProjectImage, EmailSubscription, Prediction,
)


async def delete_project_rows(db: AsyncSession, project_id: UUID) -> None:
    """Delete the project and its children in one transaction."""
    for model in _CHILD_MODELS:
        await db.execute(delete(model).where(model.project_id == project_id))
    await db.execute(delete(Project).where(Project.id == project_id))
    await db.commit()


async def delete_project_with_retry(
    project_id: UUID,
    attempts: int = DELETE_ATTEMPTS,
    delay_s: float = RETRY_DELAY_S,
) -> bool:
    """Background task: returns True once the project is gone."""
    manager = database.db_manager
    if not manager:
        logger.error(f"Cannot delete project {project_id}: database not initialized")
        return False

    for attempt in range(1, attempts + 1):
        try:
            async with manager.session() as db:
                await delete_project_rows(db, project_id)
            logger.info(
                f"Project {project_id} deleted",
                extra={"project_id": str(project_id), "attempt": attempt},
            )
            return True
        except DatabaseError as e:
            logger.warning(
                f"Project deletion attempt {attempt}/{attempts} failed: {e.message}",
                extra={"project_id": str(project_id), "attempt": attempt},
            )
            if attempt < attempts:
                await asyncio.sleep(delay_s)

    logger.error(
        f"Project {project_id} could not be deleted after {attempts} attempts",
        extra={"project_id": str(project_id)},
    )
    return False
