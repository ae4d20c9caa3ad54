"""ffmpeg Commands — argv builders for the video pipeline (no process spawning here).

Invariants:
    - Every builder returns a list[str] argv (never a shell string: no quoting bugs)
    - Outputs are always overwritten (-y) — callers own unique temp paths
    - Fresque merge needs >= 2 clips; photo wall needs >= 2 photos
    - Scroll crop window is 640x480 at 25 fps over 16 s

Design Decisions:
    - Pure builders in core: the runner (infrastructure/ffmpeg.py) only spawns and maps
      exit codes, command shapes are unit tested without ffmpeg installed
"""

SCROLL_CROP_WIDTH = 640
SCROLL_CROP_HEIGHT = 480
SCROLL_DURATION_S = 16
SCROLL_FPS = 25
PHOTO_WALL_SECONDS_PER_PHOTO = 2
FRESQUE_FIRST_DELAY_S = 0.3
FRESQUE_DELAY_STEP_S = 0.8


def convert_to_mp4(ffmpeg: str, source: str, target: str) -> list[str]:
    """webm (or any container) → H.264/AAC mp4."""
    return [
        ffmpeg, "-y", "-i", source,
        "-c:v", "libx264", "-preset", "fast", "-crf", "22",
        "-c:a", "aac", "-b:a", "128k",
        "-movflags", "+faststart",
        target,
    ]


def overlay_on_background(
    ffmpeg: str, background_image: str, video: str, target: str,
    key_color: str = "black", similarity: float = 0.005, blend: float = 0.1,
) -> list[str]:
    """Key out the clip's flat backdrop and overlay it on a still background."""
    graph = (
        f"[1:v]colorkey={key_color}:{similarity}:{blend}[fg];"
        "[0:v][fg]overlay=format=auto:shortest=1,format=yuv420p[v]"
    )
    return [
        ffmpeg, "-y", "-loop", "1", "-i", background_image, "-i", video,
        "-filter_complex", graph,
        "-map", "[v]", "-map", "1:a?",
        "-preset", "veryfast",
        target,
    ]


def fresque_delay(index: int) -> float:
    """Start delay of the n-th clip in a fresque (0, 0.3, 1.1, 1.9, ...)."""
    if index == 0:
        return 0.0
    return round(FRESQUE_FIRST_DELAY_S + (index - 1) * FRESQUE_DELAY_STEP_S, 2)


def stack_side_by_side(ffmpeg: str, clips: list[str], target: str) -> list[str]:
    """Place clips next to each other (640x480 each), staggering their start."""
    if len(clips) < 2:
        raise ValueError("a fresque needs at least two clips")
    argv = [ffmpeg, "-y"]
    for clip in clips:
        argv += ["-i", clip]
    scales = [f"[{i}:v]scale=640:480[v{i}]" for i in range(len(clips))]
    delays = [
        f"[v{i}]tpad=start_duration={fresque_delay(i)}[vd{i}]"
        for i in range(len(clips))
    ]
    stack = "".join(f"[vd{i}]" for i in range(len(clips)))
    graph = ";".join(scales + delays + [f"{stack}hstack=inputs={len(clips)}[video]"])
    return argv + [
        "-filter_complex", graph, "-map", "[video]",
        "-preset", "veryfast", "-pix_fmt", "yuv420p", target,
    ]


def concat_list(photos: list[str], seconds: int = PHOTO_WALL_SECONDS_PER_PHOTO) -> str:
    """ffconcat playlist; the last file is repeated so its duration is honoured."""
    if len(photos) < 2:
        raise ValueError("a photo wall needs at least two photos")
    lines = ["ffconcat version 1.0"]
    for photo in photos:
        escaped = photo.replace("\\", "/").replace("'", r"'\''")
        lines += [f"file '{escaped}'", f"duration {seconds}"]
    lines.append(lines[-2])
    return "\n".join(lines) + "\n"


def photo_wall(ffmpeg: str, playlist: str, target: str) -> list[str]:
    return [
        ffmpeg, "-y", "-f", "concat", "-safe", "0", "-i", playlist,
        "-vf", "scale=320:240,format=yuv420p", "-fps_mode", "vfr",
        "-c:v", "libx264", target,
    ]


def scale_to_height(ffmpeg: str, source: str, target: str, height: int = SCROLL_CROP_HEIGHT) -> list[str]:
    return [ffmpeg, "-y", "-i", source, "-vf", f"scale=-2:{height}", "-preset", "veryfast", target]


def scroll_filter(input_width: int) -> str:
    """Crop window moving left→right across the frame over the whole duration."""
    travel = input_width - SCROLL_CROP_WIDTH
    frames = SCROLL_DURATION_S * SCROLL_FPS
    x_expr = f"min(({travel}/{frames})*n\\,{travel})"
    return f"crop={SCROLL_CROP_WIDTH}:{SCROLL_CROP_HEIGHT}:{x_expr}:0"


def scroll(ffmpeg: str, source: str, target: str, input_width: int) -> list[str]:
    graph = f"[0:v]{scroll_filter(input_width)},fps={SCROLL_FPS},format=yuv420p[v]"
    return [
        ffmpeg, "-y", "-i", source, "-filter_complex", graph,
        "-map", "[v]", "-map", "0:a?", "-t", str(SCROLL_DURATION_S),
        "-preset", "veryfast", target,
    ]


def probe_dimensions(ffprobe: str, source: str) -> list[str]:
    return [
        ffprobe, "-v", "error", "-select_streams", "v:0",
        "-show_entries", "stream=width,height", "-of", "csv=p=0:s=x", source,
    ]


def parse_dimensions(output: str) -> tuple[int, int]:
    """'1280x480\\n' → (1280, 480)."""
    width, _, height = output.strip().splitlines()[0].partition("x")
    return int(width), int(height)
