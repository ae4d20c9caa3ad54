"""Photobooth API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PhotoboothError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan; vendor adapters closed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Local storage and the asset catalog are served as static files so that
      development needs no S3 bucket
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from photobooth.api.dependencies import close_adapters
from photobooth.api.error_handlers import register_error_handlers
from photobooth.api.routes import (
    auth, backgrounds, billing, email, generation, health, layouts, media,
    mosaic, projects, sessions, sharing, styles, video, watermark,
)
from photobooth.config import get_settings
from photobooth.infrastructure.database import close_db, init_db
from photobooth.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Photobooth API started")
    yield
    logger.info("Photobooth API shutting down")
    await close_adapters()
    await close_db()


app = FastAPI(title="Photobooth API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(styles.router)
app.include_router(backgrounds.router)
app.include_router(layouts.router)
app.include_router(mosaic.router)
app.include_router(watermark.router)
app.include_router(media.router)
app.include_router(sessions.router)
app.include_router(generation.router)
app.include_router(sharing.router)
app.include_router(email.router)
app.include_router(billing.router)
app.include_router(video.router)

# Static files — mounted AFTER API routes so /api/v1/* takes precedence
if settings.storage_backend == "local":
    os.makedirs(settings.local_storage_dir, exist_ok=True)
    app.mount(
        settings.local_storage_url,
        StaticFiles(directory=settings.local_storage_dir),
        name="media",
    )
if os.path.isdir(settings.asset_catalog_dir):
    app.mount(
        settings.asset_catalog_url,
        StaticFiles(directory=settings.asset_catalog_dir),
        name="assets",
    )
