"""Generation Rules — request checks and result extraction for AI vendor calls.

Invariants:
    - Replicate: model required, input must be a dict, input_image (when present)
      must be a data:image/ URI, flux-kontext models require a non-empty prompt
    - fal face swap gender: "female" for f/af styles, "male" for everything else
    - extract_image_url never raises: unknown shapes return None

Design Decisions:
    - Pure functions: the resilient clients stay generic, the rules are unit tested alone
"""

from typing import Any

from photobooth.core.domain_types import StyleGender
from photobooth.core.errors import ValidationFailedError

KONTEXT_MARKER = "flux-kontext"
DATA_IMAGE_PREFIX = "data:image/"


def validate_replicate_request(model: str | None, model_input: Any) -> None:
    """Raise ValidationFailedError when a Replicate run request is unusable."""
    if not model or not str(model).strip():
        raise ValidationFailedError("Model is required", "model")
    if not isinstance(model_input, dict):
        raise ValidationFailedError("Input must be an object", "input")
    image = model_input.get("input_image")
    if image is not None and not (
        isinstance(image, str) and image.startswith(DATA_IMAGE_PREFIX)
    ):
        raise ValidationFailedError(
            "input_image must be a data:image/ URI", "input.input_image",
        )
    if KONTEXT_MARKER in model and not str(model_input.get("prompt") or "").strip():
        raise ValidationFailedError(
            "A prompt is required for flux-kontext models", "input.prompt",
        )


def fal_gender(style_gender: str | None) -> str:
    """Map a style audience code to the face-swap model's gender_0 value."""
    try:
        return "female" if StyleGender(style_gender).is_female else "male"
    except ValueError:
        return "male"


def face_swap_arguments(face_image_url: str, target_image_url: str, style_gender: str | None) -> dict:
    return {
        "face_image_0": face_image_url,
        "gender_0": fal_gender(style_gender),
        "target_image": target_image_url,
        "workflow_type": "target_hair",
    }


def normalize_output(output: Any) -> list[str]:
    """Replicate output (str | FileOutput | list thereof) → list of URL strings."""
    if output is None:
        return []
    if isinstance(output, (list, tuple)):
        urls: list[str] = []
        for item in output:
            urls.extend(normalize_output(item))
        return urls
    url = getattr(output, "url", None)
    if isinstance(url, str):
        return [url]
    if isinstance(output, dict):
        return [u for u in (extract_image_url(output),) if u]
    return [str(output)]


def extract_image_url(result: Any) -> str | None:
    """Find the produced media URL in a fal.ai response body."""
    if not isinstance(result, dict):
        return None
    for key in ("image", "video", "output"):
        value = result.get(key)
        if isinstance(value, dict) and isinstance(value.get("url"), str):
            return value["url"]
        if isinstance(value, str) and value.startswith("http"):
            return value
    images = result.get("images")
    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, dict) and isinstance(first.get("url"), str):
            return first["url"]
    if isinstance(result.get("url"), str):
        return result["url"]
    return None
