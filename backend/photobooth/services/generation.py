"""AI Generation — booth face swaps, style transforms, background removal and the
admin Replicate playground.

Invariants:
    - Every booth generation (face swap, style transform) leaves exactly one
      PhotoSession row: success with result URLs, or failure with error_message.
      The row is committed before the error (capture fetch, request rules,
      vendor, storage) is re-raised
    - processing_time_ms measured from request start to stored result
    - Vendor results are copied into our storage: vendor URLs expire
    - Replicate playground requests pass core/generation_rules validation before
      any network call
    - Predictions persisted with normalised output (list of URL strings)

Design Decisions:
    - Services take adapters as arguments (no settings import): routes inject them
      through api/dependencies.py and tests pass fakes
    - fal needs a fetchable input: storage URLs are used when absolute, data: URIs
      otherwise (local storage in development)
"""

import asyncio
import base64
import logging
import tempfile
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from photobooth.core import asset_naming, ffmpeg_commands
from photobooth.core.domain_types import (
    GenerationProvider, MediaKind, PredictionStatus,
)
from photobooth.core.errors import (
    ExternalServiceError, PhotoboothError, ValidationFailedError,
)
from photobooth.core.generation_rules import (
    extract_image_url, face_swap_arguments, validate_replicate_request,
)
from photobooth.infrastructure.fal_client import ResilientFalClient
from photobooth.infrastructure.ffmpeg import FfmpegRunner
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.replicate_client import ResilientReplicateClient
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models import PhotoSession, Prediction, Project, Style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FalModels:
    """Background-removal endpoints; face swap takes its model per call."""
    background: str
    video_background: str


def to_data_uri(data: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


def _token() -> str:
    return uuid.uuid4().hex[:12]


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


async def _store_result(
    storage: ObjectStorage, fetcher: RemoteAssetFetcher, project: Project, url: str,
) -> str:
    data, content_type = await fetcher.fetch(url)
    filename = asset_naming.safe_filename("result", _token(), content_type)
    key = asset_naming.project_key(project.id, "results", filename)
    return await storage.put(key, data, content_type)


async def _record_session(db: AsyncSession, **fields) -> PhotoSession:
    session = PhotoSession(**fields)
    db.add(session)
    await db.commit()
    await db.refresh(session)
    return session


# ─── Booth generations ──────────────────────────────────────────

async def _run_booth_generation(
    db: AsyncSession,
    project: Project,
    style: Style,
    user_email: str | None,
    generate,
    storage: ObjectStorage,
    fetcher: RemoteAssetFetcher,
) -> PhotoSession:
    """Run one vendor generation and record its PhotoSession either way."""
    started = time.monotonic()
    base = {
        "project_id": project.id, "style_id": style.id,
        "gender": style.gender, "user_email": user_email,
    }
    try:
        result_url = await generate()
        stored_url = await _store_result(storage, fetcher, project, result_url)
    except PhotoboothError as e:
        await _record_session(
            db, **base, is_success=False, error_message=e.message,
            processing_time_ms=_elapsed_ms(started),
        )
        logger.error(
            f"Booth generation failed: {e.message}",
            extra={"project_id": str(project.id), "error_code": e.code},
        )
        raise
    session = await _record_session(
        db, **base, is_success=True,
        result_image_url=result_url, result_s3_url=stored_url,
        processing_time_ms=_elapsed_ms(started),
    )
    logger.info(
        "Booth generation recorded",
        extra={"project_id": str(project.id), "duration_ms": session.processing_time_ms},
    )
    return session


async def face_swap(
    db: AsyncSession,
    project: Project,
    style: Style,
    face_image: str,
    fal: ResilientFalClient,
    model: str,
    storage: ObjectStorage,
    fetcher: RemoteAssetFetcher,
    user_email: str | None = None,
) -> PhotoSession:
    """Swap the guest's face onto the style's preview image (standard booths)."""

    async def generate() -> str:
        if not style.preview_image:
            raise ValidationFailedError("Style has no preview image to swap onto", "style_id")
        result = await fal.run(
            model, face_swap_arguments(face_image, style.preview_image, style.gender),
        )
        url = extract_image_url(result)
        if not url:
            raise ExternalServiceError(
                "Face swap returned no image", GenerationProvider.FAL.value, "bad_response",
            )
        return url

    return await _run_booth_generation(
        db, project, style, user_email, generate, storage, fetcher,
    )


async def style_transform(
    db: AsyncSession,
    project: Project,
    style: Style,
    face_image: str,
    replicate: ResilientReplicateClient,
    model: str,
    storage: ObjectStorage,
    fetcher: RemoteAssetFetcher,
    user_email: str | None = None,
) -> PhotoSession:
    """Restyle the guest's photo with the style prompt (premium booths)."""

    async def generate() -> str:
        image = face_image
        if not image.startswith("data:"):
            data, content_type = await fetcher.fetch(image)
            image = to_data_uri(data, content_type)
        model_input = {
            "prompt": style.prompt or "",
            "input_image": image,
            "output_format": "jpg",
        }
        validate_replicate_request(model, model_input)
        output = await replicate.run(model, model_input)
        if not output:
            raise ExternalServiceError("Model returned no output", "replicate", "bad_response")
        return output[0]

    return await _run_booth_generation(
        db, project, style, user_email, generate, storage, fetcher,
    )


# ─── Background removal ─────────────────────────────────────────

async def _vendor_reference(
    storage: ObjectStorage, key: str, data: bytes, content_type: str,
) -> str:
    url = await storage.put(key, data, content_type)
    if url.startswith(("http://", "https://")):
        return url
    return to_data_uri(data, content_type)


async def _to_mp4(ffmpeg: FfmpegRunner, data: bytes) -> bytes:
    with tempfile.TemporaryDirectory(prefix="photobooth-") as workdir:
        source = Path(workdir) / "input.webm"
        target = Path(workdir) / "output.mp4"
        await asyncio.to_thread(source.write_bytes, data)
        await ffmpeg.run(
            ffmpeg_commands.convert_to_mp4(ffmpeg.ffmpeg, str(source), str(target)),
            "convert",
        )
        return await asyncio.to_thread(target.read_bytes)


async def remove_background(
    data: bytes,
    filename: str | None,
    content_type: str | None,
    fal: ResilientFalClient,
    models: FalModels,
    storage: ObjectStorage,
    fetcher: RemoteAssetFetcher,
    ffmpeg: FfmpegRunner,
) -> dict:
    """Cut the subject out of an image or a video; result stored under processed/."""
    kind = MediaKind.from_content_type(content_type)
    if kind is None:
        raise ValidationFailedError("Only images and videos are supported", "file")

    if kind is MediaKind.VIDEO:
        if content_type == "video/webm":
            data = await _to_mp4(ffmpeg, data)
            content_type = "video/mp4"
            filename = f"{Path(filename or 'video').stem}.mp4"
        name = asset_naming.safe_filename(filename, _token(), content_type)
        reference = await _vendor_reference(
            storage, asset_naming.upload_key(name), data, content_type,
        )
        result = await fal.run(models.video_background, {"video_url": reference})
    else:
        name = asset_naming.safe_filename(filename, _token(), content_type)
        reference = await _vendor_reference(
            storage, asset_naming.upload_key(name), data, content_type,
        )
        result = await fal.run(
            models.background, {"image_url": reference, "remove_background": True},
        )

    output_url = extract_image_url(result)
    if not output_url:
        raise ExternalServiceError(
            "Background removal returned nothing", GenerationProvider.FAL.value, "bad_response",
        )
    output, output_type = await fetcher.fetch(output_url)
    key = asset_naming.processed_key(f"bg_removed_{name}")
    url = await storage.put(key, output, output_type)
    logger.info(
        "Background removed",
        extra={"storage_key": key, "provider": GenerationProvider.FAL.value},
    )
    return {"url": url, "kind": kind.value}


# ─── Replicate playground ───────────────────────────────────────

async def run_model(
    replicate: ResilientReplicateClient, model: str | None, model_input,
) -> list[str]:
    validate_replicate_request(model, model_input)
    return await replicate.run(model, model_input)


def _apply_prediction(prediction: Prediction, remote: dict) -> None:
    prediction.external_id = remote.get("id") or prediction.external_id
    prediction.status = remote.get("status") or prediction.status
    prediction.output = remote.get("output") or []
    prediction.error = remote.get("error")


async def create_prediction(
    db: AsyncSession,
    replicate: ResilientReplicateClient,
    model: str,
    model_input: dict,
    version: str | None = None,
    admin_id: UUID | None = None,
    project_id: UUID | None = None,
) -> Prediction:
    validate_replicate_request(model, model_input)
    remote = await replicate.create_prediction(model, model_input, version=version)
    prediction = Prediction(
        provider=GenerationProvider.REPLICATE.value,
        model=model,
        prompt=model_input.get("prompt"),
        input={k: v for k, v in model_input.items() if k != "input_image"},
        created_by=admin_id,
        project_id=project_id,
    )
    _apply_prediction(prediction, remote)
    db.add(prediction)
    await db.commit()
    await db.refresh(prediction)
    return prediction


async def refresh_prediction(
    db: AsyncSession, replicate: ResilientReplicateClient, prediction: Prediction,
) -> Prediction:
    """Poll Replicate unless the prediction already reached a terminal state."""
    try:
        terminal = PredictionStatus(prediction.status).is_terminal
    except ValueError:
        terminal = False
    if terminal or not prediction.external_id:
        return prediction
    _apply_prediction(prediction, await replicate.get_prediction(prediction.external_id))
    await db.commit()
    await db.refresh(prediction)
    return prediction


async def generate_image(
    db: AsyncSession,
    replicate: ResilientReplicateClient,
    model: str,
    prompt: str,
    aspect_ratio: str = "1:1",
    admin_id: UUID | None = None,
    project_id: UUID | None = None,
) -> Prediction:
    """Text-to-image run, recorded as a finished Prediction (failed runs included)."""
    model_input = {"prompt": prompt, "aspect_ratio": aspect_ratio}
    prediction = Prediction(
        provider=GenerationProvider.REPLICATE.value, model=model, prompt=prompt,
        input=model_input, created_by=admin_id, project_id=project_id,
    )
    try:
        prediction.output = await run_model(replicate, model, model_input)
        prediction.status = PredictionStatus.SUCCEEDED.value
    except PhotoboothError as e:
        prediction.status = PredictionStatus.FAILED.value
        prediction.error = e.message
        db.add(prediction)
        await db.commit()
        raise
    db.add(prediction)
    await db.commit()
    await db.refresh(prediction)
    return prediction
