"""Root conftest — shared test configuration."""

import os
import tempfile

# Ensure tests never reach real vendors or a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef0123456789")
os.environ.setdefault("ADMIN_SIGNUP_SECRET", "bootstrap-secret")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("LOCAL_STORAGE_DIR", tempfile.mkdtemp(prefix="photobooth-media-"))
os.environ.setdefault("ASSET_CATALOG_DIR", tempfile.mkdtemp(prefix="photobooth-assets-"))
os.environ.setdefault("PUBLIC_BASE_URL", "https://booth.test")
for _vendor_key in (
    "REPLICATE_API_TOKEN", "FAL_KEY", "STRIPE_SECRET_KEY", "STRIPE_WEBHOOK_SECRET",
):
    os.environ.setdefault(_vendor_key, "")
