"""ffmpeg Commands — argv builders for the video pipeline."""

import pytest

from photobooth.core.ffmpeg_commands import (
    concat_list, convert_to_mp4, fresque_delay, overlay_on_background,
    parse_dimensions, scroll, scroll_filter, stack_side_by_side,
)


def test_convert_to_mp4_overwrites_and_targets_h264():
    argv = convert_to_mp4("ffmpeg", "in.webm", "out.mp4")
    assert argv[:4] == ["ffmpeg", "-y", "-i", "in.webm"]
    assert "libx264" in argv
    assert argv[-1] == "out.mp4"


def test_overlay_on_background_uses_key_color():
    argv = overlay_on_background("ffmpeg", "bg.jpg", "clip.mp4", "out.mp4", key_color="green", similarity=0.3)
    graph = argv[argv.index("-filter_complex") + 1]
    assert "colorkey=green:0.3:0.1" in graph
    assert argv[argv.index("-loop") + 1] == "1"


def test_fresque_delay_staggers_clips():
    assert [fresque_delay(i) for i in range(4)] == [0.0, 0.3, 1.1, 1.9]


def test_stack_side_by_side_needs_two_clips():
    with pytest.raises(ValueError):
        stack_side_by_side("ffmpeg", ["a.mp4"], "out.mp4")


def test_stack_side_by_side_graph():
    argv = stack_side_by_side("ffmpeg", ["a.mp4", "b.mp4", "c.mp4"], "out.mp4")
    assert argv.count("-i") == 3
    graph = argv[argv.index("-filter_complex") + 1]
    assert "hstack=inputs=3" in graph
    assert "[v1]tpad=start_duration=0.3[vd1]" in graph


def test_concat_list_repeats_last_photo():
    playlist = concat_list(["/tmp/a.jpg", "/tmp/b.jpg"])
    lines = playlist.strip().splitlines()
    assert lines[0] == "ffconcat version 1.0"
    assert lines[-1] == "file '/tmp/b.jpg'"
    assert lines.count("duration 2") == 2


def test_concat_list_needs_two_photos():
    with pytest.raises(ValueError):
        concat_list(["/tmp/a.jpg"])


def test_scroll_filter_travel():
    f = scroll_filter(1280)
    assert f.startswith("crop=640:480:")
    assert "(640/400)" in f


def test_scroll_limits_duration():
    argv = scroll("ffmpeg", "in.mp4", "out.mp4", 1280)
    assert argv[argv.index("-t") + 1] == "16"


def test_parse_dimensions():
    assert parse_dimensions("1280x480\n") == (1280, 480)
