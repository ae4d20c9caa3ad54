"""Generation Routes — booth AI pipelines (public) and the Replicate playground (admin).

Invariants:
    - Booth generations resolve project by slug and style within that project (404 otherwise)
    - Every booth generation is recorded as a PhotoSession, failed ones included
    - Predictions are private to the admin who created them
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.api.dependencies import (
    get_fal, get_ffmpeg, get_fetcher, get_replicate, get_storage, require_admin,
)
from photobooth.config import Settings, get_settings
from photobooth.core.domain_types import MediaKind
from photobooth.core.errors import ResourceNotFoundError
from photobooth.infrastructure.database import get_db
from photobooth.infrastructure.fal_client import ResilientFalClient
from photobooth.infrastructure.ffmpeg import FfmpegRunner
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.replicate_client import ResilientReplicateClient
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import AdminUser, Prediction, Project, Style
from photobooth.schemas.generation import (
    BackgroundRemovalResponse, BoothGenerationRequest, BoothGenerationResponse,
    GenerateImageRequest, PredictionCreate, PredictionResponse,
    ReplicateRunRequest, ReplicateRunResponse,
)
from photobooth.services import generation, media_library, projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/generation", tags=["generation"])


async def _booth_target(db: AsyncSession, body: BoothGenerationRequest) -> tuple[Project, Style]:
    project = await projects.get_public_project(db, body.project_slug)
    result = await db.execute(
        select(Style).where(
            Style.id == body.style_id,
            Style.project_id == project.id,
            Style.is_active.is_(True),
        ),
    )
    style = result.scalar_one_or_none()
    if style is None:
        raise ResourceNotFoundError("Style", str(body.style_id))
    return project, style


def _booth_response(session) -> BoothGenerationResponse:
    return BoothGenerationResponse(
        session_id=session.id,
        image_url=session.result_s3_url,
        processing_time_ms=session.processing_time_ms or 0,
    )


# ─── Booth pipelines ────────────────────────────────────────────

@router.post("/face-swap", response_model=BoothGenerationResponse)
async def face_swap(
    body: BoothGenerationRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    fal: ResilientFalClient = Depends(get_fal),
    storage: ObjectStorage = Depends(get_storage),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
):
    project, style = await _booth_target(db, body)
    session = await generation.face_swap(
        db, project, style, body.image, fal, settings.fal_face_swap_model,
        storage, fetcher, user_email=body.user_email,
    )
    return _booth_response(session)


@router.post("/style-transform", response_model=BoothGenerationResponse)
async def style_transform(
    body: BoothGenerationRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    replicate: ResilientReplicateClient = Depends(get_replicate),
    storage: ObjectStorage = Depends(get_storage),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
):
    project, style = await _booth_target(db, body)
    session = await generation.style_transform(
        db, project, style, body.image, replicate, settings.replicate_style_model,
        storage, fetcher, user_email=body.user_email,
    )
    return _booth_response(session)


@router.post("/remove-background", response_model=BackgroundRemovalResponse)
async def remove_background(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
    fal: ResilientFalClient = Depends(get_fal),
    storage: ObjectStorage = Depends(get_storage),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
    ffmpeg: FfmpegRunner = Depends(get_ffmpeg),
):
    data = await file.read()
    media_library.check_upload(data, file.content_type, (MediaKind.IMAGE, MediaKind.VIDEO))
    models = generation.FalModels(
        background=settings.fal_background_model,
        video_background=settings.fal_video_background_model,
    )
    return await generation.remove_background(
        data, file.filename, file.content_type, fal, models, storage, fetcher, ffmpeg,
    )


# ─── Replicate playground ───────────────────────────────────────

@router.post("/replicate", response_model=ReplicateRunResponse)
async def run_replicate(
    body: ReplicateRunRequest,
    admin: AdminUser = Depends(require_admin),
    replicate: ResilientReplicateClient = Depends(get_replicate),
):
    output = await generation.run_model(replicate, body.model, body.input)
    return ReplicateRunResponse(model=body.model, output=output)


@router.post(
    "/predictions", response_model=PredictionResponse, status_code=status.HTTP_201_CREATED,
)
async def create_prediction(
    body: PredictionCreate,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    replicate: ResilientReplicateClient = Depends(get_replicate),
):
    if body.project_id is not None:
        await projects.get_owned_project(db, body.project_id, admin.id)
    return await generation.create_prediction(
        db, replicate, body.model, body.input, version=body.version,
        admin_id=admin.id, project_id=body.project_id,
    )


@router.get("/predictions/{prediction_id}", response_model=PredictionResponse)
async def get_prediction(
    prediction_id: UUID,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    replicate: ResilientReplicateClient = Depends(get_replicate),
):
    result = await db.execute(
        select(Prediction).where(
            Prediction.id == prediction_id, Prediction.created_by == admin.id,
        ),
    )
    prediction = result.scalar_one_or_none()
    if prediction is None:
        raise ResourceNotFoundError("Prediction", str(prediction_id))
    return await generation.refresh_prediction(db, replicate, prediction)


@router.post(
    "/images", response_model=PredictionResponse, status_code=status.HTTP_201_CREATED,
)
async def generate_image(
    body: GenerateImageRequest,
    admin: AdminUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    replicate: ResilientReplicateClient = Depends(get_replicate),
):
    """Text-to-image with the configured model."""
    if body.project_id is not None:
        await projects.get_owned_project(db, body.project_id, admin.id)
    return await generation.generate_image(
        db, replicate, settings.replicate_image_model, body.prompt,
        aspect_ratio=body.aspect_ratio, admin_id=admin.id, project_id=body.project_id,
    )
