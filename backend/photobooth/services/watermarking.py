"""Watermarking — renders project watermarks onto output images with Pillow.

Invariants:
    - Output is always RGB JPEG, quality 95
    - Project text: bold font, size default 24, colour default #FFFFFF, opacity default 0.8
    - Project logo: 15% of the image width, placed by watermark_position, no opacity
    - Editor elements are scaled from the 800x1200 editor canvas before drawing
    - A logo or element image that cannot be downloaded/decoded is skipped, never fatal
    - Undecodable source images raise MediaProcessingError

Design Decisions:
    - Rendering (pure, bytes in → bytes out) separated from orchestration (fetch,
      upload, response): render_watermark runs in a worker thread and is unit tested
      without network or storage
    - Fetching goes through RemoteAssetFetcher: data: URIs work for logos too
"""

import asyncio
import io
import logging
import time
from dataclasses import dataclass, field

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from photobooth.core import asset_naming, watermark_layout
from photobooth.core.errors import (
    ExternalServiceError, MediaProcessingError, ValidationFailedError,
)
from photobooth.infrastructure.remote_assets import RemoteAssetFetcher
from photobooth.infrastructure.storage import ObjectStorage
from photobooth.models.project import Project

logger = logging.getLogger(__name__)

JPEG_QUALITY = 95
_BOLD_FONTS = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")
_REGULAR_FONTS = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")


@dataclass
class WatermarkRecipe:
    """Everything the renderer needs, already downloaded."""
    text: str | None = None
    text_position: str | None = None
    text_color: str | None = None
    text_size: int | None = None
    opacity: float | None = None
    logo: bytes | None = None
    logo_position: str | None = None
    elements: list[dict] = field(default_factory=list)
    element_images: dict[int, bytes] = field(default_factory=dict)


@dataclass
class RenderResult:
    data: bytes
    text_applied: bool
    logo_applied: bool
    elements_applied: int


# ─── Rendering ──────────────────────────────────────────────────

def load_font(size: int, bold: bool = True) -> ImageFont.ImageFont:
    for name in _BOLD_FONTS if bold else _REGULAR_FONTS:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _open_image(data: bytes, what: str) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise MediaProcessingError(f"{what} is not a readable image ({e})", "decode")
    return image.convert("RGBA")


def _with_opacity(image: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1.0:
        return image
    alpha = image.getchannel("A").point(lambda a: round(a * max(0.0, opacity)))
    image.putalpha(alpha)
    return image


def _draw_project_text(canvas: Image.Image, recipe: WatermarkRecipe) -> bool:
    if not recipe.text:
        return False
    size = recipe.text_size or watermark_layout.DEFAULT_TEXT_SIZE
    opacity = watermark_layout.DEFAULT_OPACITY if recipe.opacity is None else recipe.opacity
    placement = watermark_layout.text_placement(recipe.text_position, *canvas.size)
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).text(
        (placement.x, placement.y), recipe.text,
        font=load_font(size),
        fill=watermark_layout.parse_hex_color(recipe.text_color, opacity),
        anchor=placement.anchor,
    )
    canvas.alpha_composite(layer)
    return True


def _draw_logo(canvas: Image.Image, recipe: WatermarkRecipe) -> bool:
    if not recipe.logo:
        return False
    try:
        logo = _open_image(recipe.logo, "logo")
    except MediaProcessingError as e:
        logger.warning(f"Skipping watermark logo: {e.message}")
        return False
    size = watermark_layout.logo_size(canvas.width, logo.width, logo.height)
    logo = logo.resize(size, Image.LANCZOS)
    origin = watermark_layout.logo_origin(recipe.logo_position, *canvas.size, *size)
    canvas.alpha_composite(logo, dest=(max(0, origin[0]), max(0, origin[1])))
    return True


def _text_tile(element: dict) -> Image.Image:
    font = load_font(int(element.get("fontSize") or watermark_layout.DEFAULT_TEXT_SIZE), bold=False)
    left, top, right, bottom = font.getbbox(element["text"])
    tile = Image.new("RGBA", (max(1, right), max(1, bottom)), (0, 0, 0, 0))
    ImageDraw.Draw(tile).text(
        (0, 0), element["text"], font=font,
        fill=watermark_layout.parse_hex_color(element.get("fill"), 1.0),
    )
    return tile


def _image_tile(element: dict, data: bytes) -> Image.Image:
    tile = _open_image(data, "watermark element")
    if element.get("width") and element.get("height"):
        tile = tile.resize(
            (max(1, int(element["width"])), max(1, int(element["height"]))), Image.LANCZOS,
        )
    return tile


def _draw_elements(canvas: Image.Image, recipe: WatermarkRecipe) -> int:
    applied = 0
    for index, raw in enumerate(recipe.elements):
        element = watermark_layout.scale_element(raw, *canvas.size)
        try:
            if element.get("type") == "text" and element.get("text"):
                tile = _text_tile(element)
            elif index in recipe.element_images:
                tile = _image_tile(element, recipe.element_images[index])
            else:
                continue
        except MediaProcessingError as e:
            logger.warning(f"Skipping watermark element {index}: {e.message}")
            continue
        tile = _with_opacity(tile, float(element.get("opacity", 1.0)))
        if element.get("rotation"):
            # editor rotates clockwise, Pillow counter-clockwise
            tile = tile.rotate(-float(element["rotation"]), expand=True)
        x, y = int(element.get("x", 0)), int(element.get("y", 0))
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        layer.paste(tile, (x, y), tile)
        canvas.alpha_composite(layer)
        applied += 1
    return applied


def render_watermark(image: bytes, recipe: WatermarkRecipe) -> RenderResult:
    """Apply text, logo and editor elements; returns JPEG bytes."""
    canvas = _open_image(image, "source image")
    text_applied = _draw_project_text(canvas, recipe)
    logo_applied = _draw_logo(canvas, recipe)
    elements_applied = _draw_elements(canvas, recipe)

    out = io.BytesIO()
    canvas.convert("RGB").save(out, format="JPEG", quality=JPEG_QUALITY)
    return RenderResult(out.getvalue(), text_applied, logo_applied, elements_applied)


# ─── Orchestration ──────────────────────────────────────────────

async def _fetch_optional(fetcher: RemoteAssetFetcher, url: str | None, what: str) -> bytes | None:
    if not url:
        return None
    try:
        data, _ = await fetcher.fetch(url)
        return data
    except (ExternalServiceError, ValidationFailedError) as e:
        logger.warning(f"Could not download watermark {what} {url[:80]}: {e.message}")
        return None


async def build_recipe(project: Project, fetcher: RemoteAssetFetcher) -> WatermarkRecipe:
    elements = list(project.watermark_elements or [])
    recipe = WatermarkRecipe(
        text=project.watermark_text,
        text_position=project.watermark_text_position,
        text_color=project.watermark_text_color,
        text_size=project.watermark_text_size,
        opacity=project.watermark_opacity,
        logo=await _fetch_optional(fetcher, project.watermark_logo_url, "logo"),
        logo_position=project.watermark_position,
        elements=elements,
    )
    for index, element in enumerate(elements):
        if element.get("type") in ("image", "logo"):
            data = await _fetch_optional(fetcher, element.get("src"), "element")
            if data:
                recipe.element_images[index] = data
    return recipe


async def watermark_project_image(
    project: Project, image: bytes, fetcher: RemoteAssetFetcher,
) -> RenderResult:
    recipe = await build_recipe(project, fetcher)
    return await asyncio.to_thread(render_watermark, image, recipe)


async def apply_watermark(
    project: Project,
    image_url: str,
    fetcher: RemoteAssetFetcher,
    storage: ObjectStorage,
) -> dict:
    """Watermark a remote image and store the result under watermarked/."""
    if not project.watermark_enabled or not watermark_layout.has_project_watermark(
        project.watermark_text, project.watermark_logo_url, project.watermark_elements,
    ):
        return {
            "watermarked": False, "url": image_url, "original_url": image_url,
            "message": "Watermark disabled for this project",
        }

    image, _ = await fetcher.fetch(image_url)
    result = await watermark_project_image(project, image, fetcher)
    if not (result.text_applied or result.logo_applied or result.elements_applied):
        return {
            "watermarked": False, "url": image_url, "original_url": image_url,
            "message": "No watermark could be applied",
        }

    key = asset_naming.watermarked_key(project.id, int(time.time() * 1000))
    url = await storage.put(key, result.data, "image/jpeg")
    logger.info(
        "Watermark applied",
        extra={"project_id": str(project.id), "storage_key": key},
    )
    return {
        "watermarked": True,
        "url": url,
        "original_url": image_url,
        "text_applied": result.text_applied,
        "logo_applied": result.logo_applied,
        "elements_applied": result.elements_applied,
    }
