"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Vendor integrations are optional: an empty key disables the integration,
      routes depending on it answer 503 INTEGRATION_NOT_CONFIGURED

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


def asyncpg_url(url: str) -> str:
    """Managed Postgres hosts provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://photobooth:photobooth@db:5432/photobooth"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        return asyncpg_url(v) if isinstance(v, str) else v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Admin authentication
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    admin_session_days: int = 7
    admin_cookie_name: str = "photobooth_admin"
    admin_cookie_secure: bool = False
    admin_signup_secret: str = ""

    # Object storage
    storage_backend: str = "s3"
    aws_region: str = "eu-west-3"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_bucket: str = ""
    s3_public_base_url: str = ""
    local_storage_dir: str = "media"
    local_storage_url: str = "/media"

    # Replicate
    replicate_api_token: str = ""
    replicate_style_model: str = "black-forest-labs/flux-kontext-pro"
    replicate_image_model: str = "black-forest-labs/flux-schnell"
    replicate_max_retries: int = 3
    replicate_base_delay_ms: int = 1000
    replicate_max_delay_ms: int = 30_000

    # fal.ai
    fal_key: str = ""
    fal_base_url: str = "https://fal.run"
    fal_face_swap_model: str = "easel-ai/advanced-face-swap"
    fal_background_model: str = "fal-ai/background-removal"
    fal_video_background_model: str = "fal-ai/ben/v2/video"
    fal_timeout_seconds: int = 300
    fal_max_retries: int = 3
    fal_base_delay_ms: int = 1000
    fal_max_delay_ms: int = 30_000

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_api_base: str = "https://api.stripe.com/v1"
    public_base_url: str = "http://localhost:3000"

    # Media processing
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    asset_catalog_dir: str = "assets"
    asset_catalog_url: str = "/assets"
    remote_fetch_timeout_seconds: int = 30

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
