"""Video Routes — ffmpeg jobs for the video booths.

Invariants:
    - Uploads must be videos (images for the merge background); checked before ffmpeg runs
    - Every job answers {key, url} of the stored mp4
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from photobooth.api.dependencies import get_ffmpeg, get_fetcher, get_storage
from photobooth.core import asset_naming
from photobooth.core.domain_types import MediaKind
from photobooth.core.errors import ValidationFailedError
from photobooth.infrastructure.ffmpeg import FfmpegRunner
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.schemas.video import PhotoWallRequest, VideoResponse
from photobooth.services import media_library, media_pipeline

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/video", tags=["video"])


async def _read_video(file: UploadFile) -> tuple[bytes, str]:
    data = await file.read()
    media_library.check_upload(data, file.content_type, (MediaKind.VIDEO,))
    return data, asset_naming.extension_for(file.content_type, "mp4")


@router.post("/convert", response_model=VideoResponse)
async def convert_video(
    file: UploadFile = File(...),
    storage: ObjectStorage = Depends(get_storage),
    ffmpeg: FfmpegRunner = Depends(get_ffmpeg),
):
    data, extension = await _read_video(file)
    return await media_pipeline.convert(ffmpeg, storage, data, extension)


@router.post("/merge-background", response_model=VideoResponse)
async def merge_background(
    video: UploadFile = File(...),
    background: UploadFile = File(...),
    storage: ObjectStorage = Depends(get_storage),
    ffmpeg: FfmpegRunner = Depends(get_ffmpeg),
):
    clip, clip_extension = await _read_video(video)
    still = await background.read()
    media_library.check_upload(still, background.content_type)
    return await media_pipeline.merge_background(
        ffmpeg, storage, clip, still,
        video_extension=clip_extension,
        background_extension=asset_naming.extension_for(background.content_type),
    )


@router.post("/photo-wall", response_model=VideoResponse)
async def photo_wall(
    body: PhotoWallRequest,
    storage: ObjectStorage = Depends(get_storage),
    fetcher: RemoteAssetFetcher = Depends(get_fetcher),
    ffmpeg: FfmpegRunner = Depends(get_ffmpeg),
):
    return await media_pipeline.photo_wall(ffmpeg, storage, fetcher, body.image_urls)


@router.post("/scroll", response_model=VideoResponse)
async def scroll_video(
    file: UploadFile = File(...),
    storage: ObjectStorage = Depends(get_storage),
    ffmpeg: FfmpegRunner = Depends(get_ffmpeg),
):
    data, extension = await _read_video(file)
    return await media_pipeline.scroll(ffmpeg, storage, data, extension)


@router.post("/fresque", response_model=VideoResponse)
async def fresque(
    files: list[UploadFile] = File(...),
    storage: ObjectStorage = Depends(get_storage),
    ffmpeg: FfmpegRunner = Depends(get_ffmpeg),
):
    if len(files) < 2:
        raise ValidationFailedError("A fresque needs at least two clips", "files")
    clips = [await _read_video(file) for file in files]
    return await media_pipeline.fresque(ffmpeg, storage, clips)
