"""Email Routes — guests ask for their photo by email, admins review and send."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import get_mailer, get_owned_project_or_404, require_admin
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.mailer import SmtpMailer
from photobooth.models import AdminUser, Project
from photobooth.schemas.email import SubscriptionCreate, SubscriptionResponse
from photobooth.services import email_delivery, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["email"])


@router.post(
    "/public/projects/{slug}/email-subscriptions",
    response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED,
)
async def subscribe(
    slug: str, body: SubscriptionCreate, db: AsyncSession = Depends(get_db),
):
    project = await projects.get_public_project(db, slug)
    return await email_delivery.subscribe(db, project, body.name, body.email, body.image_url)


@router.get(
    "/projects/{project_id}/email-subscriptions", response_model=list[SubscriptionResponse],
)
async def list_subscriptions(
    project: Project = Depends(get_owned_project_or_404),
    db: AsyncSession = Depends(get_db),
):
    return await email_delivery.list_subscriptions(db, project.id)


@router.post(
    "/email-subscriptions/{subscription_id}/send", response_model=SubscriptionResponse,
)
async def send_subscription(
    subscription_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    mailer: SmtpMailer = Depends(get_mailer),
):
    subscription, project = await email_delivery.get_owned_subscription(
        db, subscription_id, admin.id,
    )
    return await email_delivery.send_subscription(db, subscription, project, mailer)
