"""Initial schema — admins, projects and everything scoped to a project.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _project_fk(ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        "project_id", UUID(as_uuid=True),
        sa.ForeignKey("projects.id", ondelete=ondelete), nullable=nullable,
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(200), nullable=False),
        sa.Column("company_name", sa.String(200), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("plan", sa.String(50), nullable=True),
        sa.Column("stripe_customer_id", sa.String(100), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(100), nullable=True),
        _created_at(),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "projects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("home_message", sa.Text, nullable=True),
        sa.Column("event_date", sa.Date, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("photobooth_type", sa.String(20), nullable=False, server_default="standard"),
        sa.Column("primary_color", sa.String(20), nullable=False, server_default="#811A53"),
        sa.Column("secondary_color", sa.String(20), nullable=False, server_default="#E5B7A5"),
        sa.Column("logo_url", sa.String(2000), nullable=True),
        sa.Column(
            "created_by", UUID(as_uuid=True),
            sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("watermark_enabled", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("watermark_text", sa.String(200), nullable=True),
        sa.Column("watermark_logo_url", sa.String(2000), nullable=True),
        sa.Column("watermark_position", sa.String(20), nullable=False, server_default="bottom-right"),
        sa.Column("watermark_text_position", sa.String(20), nullable=False, server_default="bottom-left"),
        sa.Column("watermark_text_color", sa.String(20), nullable=False, server_default="#FFFFFF"),
        sa.Column("watermark_text_size", sa.Integer, nullable=False, server_default="24"),
        sa.Column("watermark_opacity", sa.Float, nullable=False, server_default="0.8"),
        sa.Column("watermark_elements", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("email_from", sa.String(320), nullable=True),
        sa.Column("email_subject", sa.String(300), nullable=True),
        sa.Column("email_body", sa.Text, nullable=True),
        sa.Column("email_smtp_host", sa.String(255), nullable=True),
        sa.Column("email_smtp_port", sa.Integer, nullable=True),
        sa.Column("email_smtp_secure", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("email_smtp_user", sa.String(255), nullable=True),
        sa.Column("email_smtp_password", sa.String(255), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_projects_created_by", "projects", ["created_by"])

    op.create_table(
        "project_settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "project_id", UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("default_gender", sa.String(5), nullable=False, server_default="m"),
        sa.Column("show_countdown", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("max_processing_time", sa.Integer, nullable=False, server_default="60"),
        sa.Column("enable_qr_codes", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("enable_fullscreen", sa.Boolean, nullable=False, server_default="true"),
    )

    op.create_table(
        "styles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _project_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("gender", sa.String(5), nullable=False, server_default="m"),
        sa.Column("style_key", sa.String(100), nullable=False),
        sa.Column("prompt", sa.Text, nullable=True),
        sa.Column("variations", sa.Integer, nullable=False, server_default="1"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("preview_image", sa.String(2000), nullable=True),
        sa.Column("storage_path", sa.String(1000), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        _created_at(),
    )
    op.create_index("ix_styles_project_id", "styles", ["project_id"])

    op.create_table(
        "backgrounds",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _project_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("image_url", sa.String(2000), nullable=False),
        sa.Column("storage_path", sa.String(1000), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        _created_at(),
    )
    op.create_index("ix_backgrounds_project_id", "backgrounds", ["project_id"])

    op.create_table(
        "templates",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("layout_data", sa.JSON, nullable=False),
        sa.Column("thumbnail_url", sa.String(2000), nullable=True),
        sa.Column(
            "created_by", UUID(as_uuid=True),
            sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True,
        ),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_templates_created_by", "templates", ["created_by"])

    op.create_table(
        "layouts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "project_id", UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("layout_data", sa.JSON, nullable=False),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "mosaic_settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "project_id", UUID(as_uuid=True),
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("bg_color", sa.String(20), nullable=False, server_default="#000000"),
        sa.Column("bg_image_url", sa.String(2000), nullable=False, server_default=""),
        sa.Column("title", sa.String(300), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("show_qr_code", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("qr_title", sa.String(200), nullable=False, server_default="Scannez-moi"),
        sa.Column("qr_description", sa.Text, nullable=False, server_default=""),
        sa.Column("qr_position", sa.String(20), nullable=False, server_default="center"),
        _updated_at(),
    )

    op.create_table(
        "sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _project_fk(ondelete="SET NULL", nullable=True),
        sa.Column(
            "style_id", UUID(as_uuid=True),
            sa.ForeignKey("styles.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("gender", sa.String(5), nullable=True),
        sa.Column("user_email", sa.String(320), nullable=True),
        sa.Column("result_image_url", sa.String(2000), nullable=True),
        sa.Column("result_s3_url", sa.String(2000), nullable=True),
        sa.Column("watermarked_url", sa.String(2000), nullable=True),
        sa.Column("processing_time_ms", sa.Integer, nullable=True),
        sa.Column("is_success", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column("moderation", sa.String(1), nullable=True),
        _created_at(),
    )
    op.create_index("ix_sessions_project_id", "sessions", ["project_id"])
    op.create_index("ix_sessions_created_at", "sessions", ["created_at"])

    op.create_table(
        "project_images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _project_fk(),
        sa.Column("image_url", sa.String(2000), nullable=False),
        sa.Column("storage_path", sa.String(1000), nullable=True),
        sa.Column("is_moderated", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("metadata", sa.JSON, nullable=False, server_default="{}"),
        _created_at(),
    )
    op.create_index("ix_project_images_project_id", "project_images", ["project_id"])

    op.create_table(
        "email_subscriptions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _project_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("image_url", sa.String(2000), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_email_subscriptions_project_id", "email_subscriptions", ["project_id"])

    op.create_table(
        "predictions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _project_fk(nullable=True),
        sa.Column(
            "created_by", UUID(as_uuid=True),
            sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("model", sa.String(200), nullable=False),
        sa.Column("external_id", sa.String(100), nullable=True),
        sa.Column("prompt", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="starting"),
        sa.Column("input", sa.JSON, nullable=False),
        sa.Column("output", sa.JSON, nullable=False),
        sa.Column("error", sa.Text, nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_predictions_project_id", "predictions", ["project_id"])
    op.create_index("ix_predictions_external_id", "predictions", ["external_id"])


def downgrade() -> None:
    op.drop_table("predictions")
    op.drop_table("email_subscriptions")
    op.drop_table("project_images")
    op.drop_table("sessions")
    op.drop_table("mosaic_settings")
    op.drop_table("layouts")
    op.drop_table("templates")
    op.drop_table("backgrounds")
    op.drop_table("styles")
    op.drop_table("project_settings")
    op.drop_table("projects")
    op.drop_table("admin_users")
