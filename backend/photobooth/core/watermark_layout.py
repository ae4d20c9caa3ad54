"""Watermark Layout — pure geometry for project watermarks and editor elements.

Invariants:
    - Text and logo keep a 20px padding from the image edges
    - Top-anchored text baseline sits 30px lower than the padding (room for glyph height)
    - Logo width is 15% of the image width, height follows the logo aspect ratio
    - Unknown positions fall back to bottom-right
    - Editor elements are authored on an 800x1200 canvas and scaled per axis;
      font sizes scale by the smaller axis factor so text never overflows

Design Decisions:
    - Anchors returned as Pillow anchor codes ("ls", "rs", "ms"): renderer stays a thin
      Pillow call, all arithmetic lives here and is unit tested
"""

from dataclasses import dataclass

from photobooth.core.domain_types import WatermarkPosition

PADDING = 20
TOP_TEXT_OFFSET = 30
LOGO_WIDTH_RATIO = 0.15
EDITOR_WIDTH = 800
EDITOR_HEIGHT = 1200

DEFAULT_TEXT_SIZE = 24
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_OPACITY = 0.8


@dataclass(frozen=True)
class TextPlacement:
    x: int
    y: int
    anchor: str


def _coerce_position(position: str | None) -> WatermarkPosition | None:
    try:
        return WatermarkPosition(position) if position else None
    except ValueError:
        return None


def text_placement(position: str | None, width: int, height: int) -> TextPlacement:
    """Baseline point and Pillow anchor for the project watermark text."""
    pos = _coerce_position(position)
    if pos in (WatermarkPosition.TOP_RIGHT, WatermarkPosition.BOTTOM_RIGHT):
        x, horizontal = width - PADDING, "r"
    elif pos in (WatermarkPosition.TOP_LEFT, WatermarkPosition.BOTTOM_LEFT):
        x, horizontal = PADDING, "l"
    else:
        x, horizontal = width // 2, "m"

    if pos in (WatermarkPosition.TOP_LEFT, WatermarkPosition.TOP_RIGHT):
        y = PADDING + TOP_TEXT_OFFSET
    elif pos in (WatermarkPosition.BOTTOM_LEFT, WatermarkPosition.BOTTOM_RIGHT):
        y = height - PADDING
    else:
        y = height // 2
    return TextPlacement(x=x, y=y, anchor=f"{horizontal}s")


def logo_size(image_width: int, logo_width: int, logo_height: int) -> tuple[int, int]:
    """Target logo size: 15% of the image width, aspect ratio preserved."""
    target_width = max(1, round(image_width * LOGO_WIDTH_RATIO))
    if logo_width <= 0:
        return target_width, target_width
    target_height = max(1, round(logo_height * target_width / logo_width))
    return target_width, target_height


def logo_origin(
    position: str | None, width: int, height: int, logo_width: int, logo_height: int,
) -> tuple[int, int]:
    """Top-left corner of the logo for a given anchor."""
    pos = _coerce_position(position)
    if pos is WatermarkPosition.TOP_LEFT:
        return PADDING, PADDING
    if pos is WatermarkPosition.TOP_RIGHT:
        return width - logo_width - PADDING, PADDING
    if pos is WatermarkPosition.BOTTOM_LEFT:
        return PADDING, height - logo_height - PADDING
    if pos is WatermarkPosition.CENTER:
        return (width - logo_width) // 2, (height - logo_height) // 2
    return width - logo_width - PADDING, height - logo_height - PADDING


def scale_element(element: dict, target_width: int, target_height: int) -> dict:
    """Scale an editor element from the editor canvas to the target image."""
    scale_x = target_width / EDITOR_WIDTH
    scale_y = target_height / EDITOR_HEIGHT
    scaled = dict(element)
    if "x" in element:
        scaled["x"] = round(float(element["x"]) * scale_x)
    if "y" in element:
        scaled["y"] = round(float(element["y"]) * scale_y)
    if element.get("type") in ("image", "logo") and element.get("width") and element.get("height"):
        scaled["width"] = round(float(element["width"]) * scale_x)
        scaled["height"] = round(float(element["height"]) * scale_y)
    if element.get("type") == "text" and element.get("fontSize"):
        scaled["fontSize"] = round(float(element["fontSize"]) * min(scale_x, scale_y))
    return scaled


def parse_hex_color(value: str | None, opacity: float = 1.0) -> tuple[int, int, int, int]:
    """'#RGB' / '#RRGGBB' + opacity (0-1) → RGBA tuple. Invalid input → white."""
    raw = (value or DEFAULT_TEXT_COLOR).strip().lstrip("#")
    if len(raw) == 3:
        raw = "".join(c * 2 for c in raw)
    try:
        r, g, b = (int(raw[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        r, g, b = 255, 255, 255
    if len(raw) != 6:
        r, g, b = 255, 255, 255
    alpha = round(255 * min(1.0, max(0.0, opacity)))
    return r, g, b, alpha


def has_project_watermark(text: str | None, logo_url: str | None, elements: list | None) -> bool:
    """True when at least one watermark source is configured."""
    return bool(text) or bool(logo_url) or bool(elements)
