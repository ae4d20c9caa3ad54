"""ffmpeg Runner — spawns ffmpeg/ffprobe argv lists built by core/ffmpeg_commands.py.

Invariants:
    - Processes are spawned without a shell (asyncio.create_subprocess_exec)
    - Non-zero exit → MediaProcessingError carrying the last stderr lines
    - Missing binary → IntegrationNotConfiguredError("ffmpeg")
    - A run exceeding timeout_seconds is killed and reported as MediaProcessingError
"""

import asyncio
import logging
import shutil
import time

from photobooth.core import ffmpeg_commands
from photobooth.core.errors import IntegrationNotConfiguredError, MediaProcessingError

logger = logging.getLogger(__name__)


class FfmpegRunner:
    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe", timeout_seconds: int = 600):
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.timeout_seconds = timeout_seconds

    def available(self) -> bool:
        return shutil.which(self.ffmpeg) is not None

    async def run(self, argv: list[str], operation: str) -> str:
        """Run argv; returns stdout."""
        started = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise IntegrationNotConfiguredError("ffmpeg")
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise MediaProcessingError(
                f"timed out after {self.timeout_seconds}s", operation,
            )
        if process.returncode != 0:
            tail = stderr.decode("utf-8", "replace").strip().splitlines()[-5:]
            logger.error(
                f"ffmpeg {operation} exited with {process.returncode}: {' | '.join(tail)}",
            )
            raise MediaProcessingError(f"ffmpeg exited with {process.returncode}", operation)
        logger.info(
            f"ffmpeg {operation} done",
            extra={"duration_ms": int((time.monotonic() - started) * 1000)},
        )
        return stdout.decode("utf-8", "replace")

    async def dimensions(self, path: str) -> tuple[int, int]:
        output = await self.run(
            ffmpeg_commands.probe_dimensions(self.ffprobe, path), "probe",
        )
        try:
            return ffmpeg_commands.parse_dimensions(output)
        except (ValueError, IndexError):
            raise MediaProcessingError(f"unreadable probe output {output!r}", "probe")
