"""ffmpeg output sink: streams PNG frames into an H.264 encoder process."""

import asyncio
import contextlib
import logging
import subprocess
from typing import BinaryIO

from ..constants import (
    DEFAULT_FPS,
    FFMPEG_BINARY,
    LOG_PATH,
    OUTPUT_PATH,
    PIXEL_FORMAT,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_PROFILE,
)
from ..errors import EncoderProcessFailure
from .base import OutputSink

logger = logging.getLogger(__name__)


class FfmpegOutputProvider(OutputSink):
    """
    Output sink that pipes frames to ffmpeg's image2pipe demuxer.

    Every write waits for the pipe to drain, so a slow encoder slows the
    capture loop down instead of buffering frames in memory. ffmpeg's stdout
    and stderr both go to ``log_path``. A non-zero exit is logged, not raised.
    """

    def __init__(
        self,
        path: str = OUTPUT_PATH,
        fps: int = DEFAULT_FPS,
        log_path: str = LOG_PATH,
        binary: str = FFMPEG_BINARY,
    ):
        super().__init__(path)
        self.fps = fps
        self.log_path = log_path
        self.binary = binary
        self.frames_dropped = 0
        self._process: asyncio.subprocess.Process | None = None
        self._log_file: BinaryIO | None = None
        self._broken = False

    def build_command(self) -> list[str]:
        return [
            self.binary,
            "-y",  # Overwrite output file
            "-framerate", str(self.fps),
            "-f", "image2pipe",
            "-i", "-",
            "-c:v", VIDEO_CODEC,
            "-profile:v", VIDEO_PROFILE,
            "-crf", str(VIDEO_CRF),
            "-pix_fmt", PIXEL_FORMAT,
            self.path,
        ]

    async def start(self) -> None:
        command = self.build_command()
        logger.debug("Starting encoder: %s", " ".join(command))
        self._log_file = open(self.log_path, "wb")
        try:
            self._process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=self._log_file,
                stderr=subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            self._close_log()
            raise EncoderProcessFailure(
                f"'{self.binary}' not found. Install ffmpeg or set RECORDER_FFMPEG_BINARY."
            ) from e
        except OSError as e:
            self._close_log()
            raise EncoderProcessFailure(f"Failed to start '{self.binary}': {e}") from e

    async def write(self, frame: bytes) -> None:
        if self._process is None or self._process.stdin is None:
            raise RuntimeError("Encoder has not been started")
        if self._broken:
            self.frames_dropped += 1
            return

        try:
            self._process.stdin.write(frame)
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            # The exit status is reported by finish(); keep the capture loop going.
            logger.warning("Encoder stopped accepting frames. Check %s for details", self.log_path)
            self._broken = True
            self.frames_dropped += 1
            return
        self.frames_written += 1

    async def finish(self) -> int | None:
        if self._process is None:
            return None

        stdin = self._process.stdin
        if stdin is not None and not stdin.is_closing():
            stdin.close()
            with contextlib.suppress(BrokenPipeError, ConnectionResetError):
                await stdin.wait_closed()

        return_code = await self._process.wait()
        self._close_log()
        if return_code != 0:
            logger.error(
                "ffmpeg encountered an error (exit code %d). Check %s for more details",
                return_code,
                self.log_path,
            )
        if self.frames_dropped:
            logger.warning("%d frame(s) were not delivered to the encoder", self.frames_dropped)
        return return_code

    def _close_log(self) -> None:
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None
