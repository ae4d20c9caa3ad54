"""Project Stats — pure aggregation over photo sessions."""

from types import SimpleNamespace
from uuid import uuid4

from photobooth.core.project_stats import compute_project_stats


def _session(style_id=None, ok=True, ms=None, moderation=None):
    return SimpleNamespace(
        style_id=style_id, is_success=ok, processing_time_ms=ms, moderation=moderation,
    )


def test_empty_input_yields_zeros():
    stats = compute_project_stats([])
    assert stats["total_sessions"] == 0
    assert stats["success_rate"] == 0.0
    assert stats["average_processing_ms"] is None
    assert stats["sessions_per_style"] == {}


def test_counts_and_rates():
    style = uuid4()
    stats = compute_project_stats([
        _session(style, True, 1000),
        _session(style, True, 3000, moderation="M"),
        _session(None, False, None),
    ])
    assert stats["total_sessions"] == 3
    assert stats["successful_sessions"] == 2
    assert stats["failed_sessions"] == 1
    assert stats["moderated_sessions"] == 1
    assert stats["success_rate"] == 66.7
    assert stats["average_processing_ms"] == 2000
    assert stats["sessions_per_style"] == {str(style): 2}
