"""Project Stats — pure computation of photo-session statistics for the admin dashboard.

Invariants:
    - Input is a sequence of session-like objects (no IO, no DB)
    - Never raises — missing processing times are ignored, empty input yields zeros
    - success_rate is a 0-100 percentage rounded to one decimal

Design Decisions:
    - Pure function over SQL aggregates: sqlite (tests) and Postgres agree on the result,
      and project volumes (one event) stay small enough to load
"""

from collections import Counter
from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from photobooth.core.domain_types import MODERATED_FLAG


class SessionLike(Protocol):
    """Structural contract for PhotoSession rows passed to stats."""
    style_id: UUID | None
    is_success: bool
    processing_time_ms: int | None
    moderation: str | None


def compute_project_stats(sessions: Iterable[SessionLike]) -> dict:
    """Compute summary statistics from photo sessions. Pure, no IO."""
    total = succeeded = moderated = 0
    durations: list[int] = []
    per_style: Counter[str] = Counter()

    for s in sessions:
        total += 1
        if s.is_success:
            succeeded += 1
        if s.moderation == MODERATED_FLAG:
            moderated += 1
        if s.processing_time_ms is not None:
            durations.append(s.processing_time_ms)
        if s.style_id is not None:
            per_style[str(s.style_id)] += 1

    return {
        "total_sessions": total,
        "successful_sessions": succeeded,
        "failed_sessions": total - succeeded,
        "moderated_sessions": moderated,
        "success_rate": round(100 * succeeded / total, 1) if total else 0.0,
        "average_processing_ms": (
            round(sum(durations) / len(durations)) if durations else None
        ),
        "sessions_per_style": dict(per_style.most_common()),
    }
