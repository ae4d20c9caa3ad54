"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in services
    - MODERATED_FLAG is the only non-null value of sessions.moderation

Design Decisions:
    - str Enums: serialize to JSON without custom encoders and compare equal to DB strings
"""

from enum import Enum


# ─── Constants ───────────────────────────────────────────────────

MODERATED_FLAG = "M"


# ─── Enums ───────────────────────────────────────────────────────

class PhotoboothType(str, Enum):
    """Capture flow a project runs — selects the AI pipeline used by the booth."""
    STANDARD = "standard"        # fal.ai face swap onto style preview
    PREMIUM = "premium"          # Replicate flux-kontext restyle
    PHOTOBOOTH2 = "photobooth2"  # background replacement
    AVATAR = "avatar"


class StyleGender(str, Enum):
    """Style audience codes used by the capture flow's gender picker."""
    MALE = "m"
    FEMALE = "f"
    BOY = "ag"
    GIRL = "af"
    GROUP = "g"
    NEUTRAL = "nb"

    @property
    def is_female(self) -> bool:
        return self in (StyleGender.FEMALE, StyleGender.GIRL)


class WatermarkPosition(str, Enum):
    """Anchor for watermark text and logo."""
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    CENTER = "center"


class SubscriptionStatus(str, Enum):
    """Email subscription delivery states."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class PredictionStatus(str, Enum):
    """Replicate prediction states (fal calls are synchronous: succeeded/failed only)."""
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            PredictionStatus.SUCCEEDED,
            PredictionStatus.FAILED,
            PredictionStatus.CANCELED,
        )


class GenerationProvider(str, Enum):
    REPLICATE = "replicate"
    FAL = "fal"


class MediaKind(str, Enum):
    """Coarse media type derived from upload content type."""
    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> "MediaKind | None":
        if not content_type:
            return None
        if content_type.startswith("image/"):
            return cls.IMAGE
        if content_type.startswith("video/"):
            return cls.VIDEO
        return None
