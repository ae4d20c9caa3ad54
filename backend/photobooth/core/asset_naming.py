"""Asset Naming — storage keys, safe file names, slugs and catalog labels.

Invariants:
    - Storage keys never start with "/" and never contain ".." segments
    - safe_filename keeps the extension, lowercases it, and maps every other
      unsafe character to "_"
    - Keys that need uniqueness take the timestamp/token as an argument (no clock here)
"""

import re
import unicodedata
from uuid import UUID

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_CATALOG_BACKGROUND = re.compile(r"^background-?(.+)\.(png|jpe?g|webp)$", re.IGNORECASE)
_FRESQUE_THEME = re.compile(r"^bg-.+\.(jpe?g|png)$", re.IGNORECASE)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
}


def extension_for(content_type: str | None, default: str = "jpg") -> str:
    return _EXTENSIONS.get((content_type or "").lower(), default)


def safe_filename(filename: str | None, token: str, content_type: str | None = None) -> str:
    """'Mon Selfie!.PNG' + token → 'Mon_Selfie-<token>.png'."""
    name = (filename or "").rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    stem, dot, ext = name.rpartition(".")
    if not dot:
        stem, ext = name, extension_for(content_type)
    stem = _UNSAFE_CHARS.sub("_", stem).strip("._") or "file"
    ext = _UNSAFE_CHARS.sub("", ext).lower() or extension_for(content_type)
    return f"{stem[:80]}-{token}.{ext}"


def upload_key(filename: str) -> str:
    return f"uploads/{filename}"


def project_key(project_id: UUID, folder: str, filename: str) -> str:
    return f"projects/{project_id}/{folder}/{filename}"


def project_prefix(project_id: UUID) -> str:
    return f"projects/{project_id}/"


def watermarked_key(project_id: UUID, timestamp_ms: int) -> str:
    return f"watermarked/{project_id}/{timestamp_ms}.jpg"


def processed_key(filename: str) -> str:
    return f"processed/{filename}"


def video_key(filename: str) -> str:
    return f"videos/{filename}"


def is_safe_key(key: str) -> bool:
    """Reject absolute keys and path traversal."""
    if not key or key.startswith("/") or "\\" in key:
        return False
    return all(part not in ("", ".", "..") for part in key.split("/"))


def slugify(value: str) -> str:
    """'Soirée Été 2025' → 'soiree-ete-2025'."""
    ascii_value = (
        unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    )
    return _SLUG_CHARS.sub("-", ascii_value.lower()).strip("-")


def background_label(filename: str) -> str | None:
    """Catalog background file → display name ('background-3.png' → 'Fond 3')."""
    match = _CATALOG_BACKGROUND.match(filename)
    if not match:
        return None
    suffix = match.group(1).replace("-", " ").replace("_", " ").strip()
    return f"Fond {suffix[:1].upper()}{suffix[1:]}" if suffix else None


def is_fresque_theme(filename: str) -> bool:
    return bool(_FRESQUE_THEME.match(filename))
