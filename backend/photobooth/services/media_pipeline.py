"""Media Pipeline — ffmpeg jobs of the video booths (conversion, backdrops, photo walls).

Invariants:
    - Each job works in its own temporary directory, removed when the job ends
    - Outputs are mp4 files stored under videos/ with a unique name
    - Inputs too short for a job (photo wall < 2 images) are ValidationFailedError
      before ffmpeg is spawned
    - Scroll only crops when the input is wider than the 640px window; narrower
      inputs are stored as converted
"""

import asyncio
import logging
import tempfile
import uuid
from pathlib import Path

from photobooth.core import asset_naming, ffmpeg_commands
from photobooth.core.errors import ValidationFailedError
from photobooth.infrastructure.ffmpeg import FfmpegRunner
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.storage import ObjectStorage

logger = logging.getLogger(__name__)

BACKGROUND_KEY_COLOR = "green"
BACKGROUND_SIMILARITY = 0.3
BACKGROUND_BLEND = 0.1


def _output_name(stem: str) -> str:
    return f"{stem}-{uuid.uuid4().hex[:12]}.mp4"


async def _write(path: Path, data: bytes) -> str:
    await asyncio.to_thread(path.write_bytes, data)
    return str(path)


async def _store_video(storage: ObjectStorage, path: Path, stem: str) -> dict:
    data = await asyncio.to_thread(path.read_bytes)
    key = asset_naming.video_key(_output_name(stem))
    url = await storage.put(key, data, "video/mp4")
    logger.info("Video stored", extra={"storage_key": key})
    return {"key": key, "url": url}


async def convert(
    ffmpeg: FfmpegRunner, storage: ObjectStorage, data: bytes, extension: str = "webm",
) -> dict:
    """Any captured clip → H.264 mp4."""
    with tempfile.TemporaryDirectory(prefix="photobooth-") as workdir:
        source = await _write(Path(workdir) / f"input.{extension}", data)
        target = Path(workdir) / "output.mp4"
        await ffmpeg.run(
            ffmpeg_commands.convert_to_mp4(ffmpeg.ffmpeg, source, str(target)), "convert",
        )
        return await _store_video(storage, target, "converted")


async def merge_background(
    ffmpeg: FfmpegRunner,
    storage: ObjectStorage,
    video: bytes,
    background: bytes,
    video_extension: str = "mp4",
    background_extension: str = "jpg",
) -> dict:
    """Key out the clip's green backdrop and lay it over a still background."""
    with tempfile.TemporaryDirectory(prefix="photobooth-") as workdir:
        clip = await _write(Path(workdir) / f"clip.{video_extension}", video)
        still = await _write(Path(workdir) / f"background.{background_extension}", background)
        target = Path(workdir) / "merged.mp4"
        await ffmpeg.run(
            ffmpeg_commands.overlay_on_background(
                ffmpeg.ffmpeg, still, clip, str(target),
                key_color=BACKGROUND_KEY_COLOR,
                similarity=BACKGROUND_SIMILARITY,
                blend=BACKGROUND_BLEND,
            ),
            "merge_background",
        )
        return await _store_video(storage, target, "merged")


async def photo_wall(
    ffmpeg: FfmpegRunner,
    storage: ObjectStorage,
    fetcher: RemoteAssetFetcher,
    image_urls: list[str],
) -> dict:
    """Slideshow of the given photos, two seconds each."""
    if len(image_urls) < 2:
        raise ValidationFailedError("A photo wall needs at least two images", "image_urls")
    with tempfile.TemporaryDirectory(prefix="photobooth-") as workdir:
        photos = []
        for index, url in enumerate(image_urls):
            data, content_type = await fetcher.fetch(url)
            ext = asset_naming.extension_for(content_type)
            photos.append(await _write(Path(workdir) / f"photo-{index:03d}.{ext}", data))
        playlist = Path(workdir) / "photos.ffconcat"
        await asyncio.to_thread(playlist.write_text, ffmpeg_commands.concat_list(photos))
        target = Path(workdir) / "wall.mp4"
        await ffmpeg.run(
            ffmpeg_commands.photo_wall(ffmpeg.ffmpeg, str(playlist), str(target)), "photo_wall",
        )
        return await _store_video(storage, target, "photo-wall")


async def scroll(
    ffmpeg: FfmpegRunner, storage: ObjectStorage, data: bytes, extension: str = "mp4",
) -> dict:
    """Pan a 640x480 window across a wide video (e.g. a photo wall strip)."""
    with tempfile.TemporaryDirectory(prefix="photobooth-") as workdir:
        source = await _write(Path(workdir) / f"input.{extension}", data)
        scaled = Path(workdir) / "scaled.mp4"
        await ffmpeg.run(
            ffmpeg_commands.scale_to_height(ffmpeg.ffmpeg, source, str(scaled)), "scale",
        )
        width, _ = await ffmpeg.dimensions(str(scaled))
        if width <= ffmpeg_commands.SCROLL_CROP_WIDTH:
            result = await _store_video(storage, scaled, "scroll")
            return {**result, "scrolled": False}
        target = Path(workdir) / "scroll.mp4"
        await ffmpeg.run(
            ffmpeg_commands.scroll(ffmpeg.ffmpeg, str(scaled), str(target), width), "scroll",
        )
        result = await _store_video(storage, target, "scroll")
        return {**result, "scrolled": True}


async def fresque(
    ffmpeg: FfmpegRunner, storage: ObjectStorage, clips: list[tuple[bytes, str]],
) -> dict:
    """Clips side by side, each starting a little after its left neighbour."""
    if len(clips) < 2:
        raise ValidationFailedError("A fresque needs at least two clips", "files")
    with tempfile.TemporaryDirectory(prefix="photobooth-") as workdir:
        paths = [
            await _write(Path(workdir) / f"clip-{index:02d}.{extension}", data)
            for index, (data, extension) in enumerate(clips)
        ]
        target = Path(workdir) / "fresque.mp4"
        await ffmpeg.run(
            ffmpeg_commands.stack_side_by_side(ffmpeg.ffmpeg, paths, str(target)), "fresque",
        )
        return await _store_video(storage, target, "fresque")
