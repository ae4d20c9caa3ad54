"""Email Delivery — photo-by-email subscriptions sent through each project's SMTP server.

Invariants:
    - A project must have an SMTP host and user before anything is sent (400 otherwise)
    - Port defaults to 587; secure=True means implicit TLS
    - Sender defaults to the SMTP user when email_from is unset
    - Outcome always persisted: sent (+ sent_at) or failed (+ error_message);
      a failed delivery is re-raised after the row is committed
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.core.domain_types import SubscriptionStatus
from photobooth.core.email_template import DEFAULT_SUBJECT, render_photo_email
from photobooth.core.errors import (
    ExternalServiceError, ResourceNotFoundError, ValidationFailedError,
)
from photobooth.infrastructure.mailer import SmtpMailer, SmtpSettings
from photobooth.models import EmailSubscription, Project

logger = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 587


async def subscribe(
    db: AsyncSession, project: Project, name: str, email: str, image_url: str,
) -> EmailSubscription:
    subscription = EmailSubscription(
        project_id=project.id, name=name, email=email, image_url=image_url,
        status=SubscriptionStatus.PENDING.value,
    )
    db.add(subscription)
    await db.commit()
    await db.refresh(subscription)
    return subscription


async def list_subscriptions(db: AsyncSession, project_id: UUID) -> list[EmailSubscription]:
    result = await db.execute(
        select(EmailSubscription)
        .where(EmailSubscription.project_id == project_id)
        .order_by(EmailSubscription.created_at.desc()),
    )
    return list(result.scalars().all())


async def get_owned_subscription(
    db: AsyncSession, subscription_id: UUID, admin_id: UUID,
) -> tuple[EmailSubscription, Project]:
    result = await db.execute(
        select(EmailSubscription, Project)
        .join(Project, Project.id == EmailSubscription.project_id)
        .where(EmailSubscription.id == subscription_id, Project.created_by == admin_id),
    )
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Email subscription", str(subscription_id))
    return row[0], row[1]


def smtp_settings_for(project: Project) -> SmtpSettings:
    if not project.email_smtp_host or not project.email_smtp_user:
        raise ValidationFailedError(
            "SMTP host and user must be configured for this project", "email_smtp_host",
        )
    return SmtpSettings(
        host=project.email_smtp_host,
        port=project.email_smtp_port or DEFAULT_SMTP_PORT,
        secure=bool(project.email_smtp_secure),
        user=project.email_smtp_user,
        password=project.email_smtp_password,
    )


async def send_subscription(
    db: AsyncSession,
    subscription: EmailSubscription,
    project: Project,
    mailer: SmtpMailer,
) -> EmailSubscription:
    smtp = smtp_settings_for(project)
    html = render_photo_email(
        subscription.name, subscription.image_url, project.name,
        body=project.email_body, accent_color=project.primary_color,
    )
    try:
        await mailer.send_html(
            smtp,
            sender=project.email_from or project.email_smtp_user,
            recipient=subscription.email,
            subject=project.email_subject or DEFAULT_SUBJECT,
            html=html,
        )
    except ExternalServiceError as e:
        subscription.status = SubscriptionStatus.FAILED.value
        subscription.error_message = e.message
        await db.commit()
        raise
    subscription.status = SubscriptionStatus.SENT.value
    subscription.sent_at = datetime.now(timezone.utc)
    subscription.error_message = None
    await db.commit()
    await db.refresh(subscription)
    logger.info("Photo email sent", extra={"project_id": str(project.id)})
    return subscription
