"""Tests for the ffmpeg output sink."""

import asyncio
import logging
import sys

import pytest

from web_animation_recorder.errors import EncoderProcessFailure
from web_animation_recorder.output import FfmpegOutputProvider

# Stands in for ffmpeg: drains stdin, reports to stderr, exits with argv[1].
READ_ALL = (
    "import sys\n"
    "data = sys.stdin.buffer.read()\n"
    "sys.stderr.write(f'received {len(data)} bytes\\n')\n"
    "sys.exit(int(sys.argv[1]))\n"
)
EXIT_AT_ONCE = "import sys\nsys.exit(int(sys.argv[1]))\n"


class StandInProvider(FfmpegOutputProvider):
    """FfmpegOutputProvider that launches a Python script instead of ffmpeg."""

    def __init__(self, script: str, exit_code: int, **kwargs):
        super().__init__(**kwargs)
        self.script = script
        self.exit_code = exit_code

    def build_command(self) -> list[str]:
        return [sys.executable, "-c", self.script, str(self.exit_code)]


async def _feed(provider: FfmpegOutputProvider, frames: list[bytes]) -> int | None:
    await provider.start()
    for frame in frames:
        await provider.write(frame)
    return await provider.finish()


def test_command_matches_h264_pipeline():
    provider = FfmpegOutputProvider("out.mp4", fps=24, log_path="x.log")

    command = provider.build_command()

    assert command[0] == "ffmpeg"
    assert command[1] == "-y"
    assert command[command.index("-framerate") + 1] == "24"
    assert command[command.index("-f") + 1] == "image2pipe"
    assert command[command.index("-i") + 1] == "-"
    assert command[command.index("-c:v") + 1] == "libx264"
    assert command[command.index("-profile:v") + 1] == "high"
    assert command[command.index("-crf") + 1] == "20"
    assert command[command.index("-pix_fmt") + 1] == "yuv420p"
    assert command[-1] == "out.mp4"


def test_frames_reach_encoder_and_output_is_logged(tmp_path):
    log_path = tmp_path / "ffmpeg.log"
    provider = StandInProvider(READ_ALL, 0, path=str(tmp_path / "out.mp4"), log_path=str(log_path))

    return_code = asyncio.run(_feed(provider, [b"a" * 10, b"b" * 20, b"c" * 30]))

    assert return_code == 0
    assert provider.frames_written == 3
    assert provider.frames_dropped == 0
    assert log_path.read_text() == "received 60 bytes\n"


def test_non_zero_exit_is_logged_not_raised(tmp_path, caplog):
    log_path = tmp_path / "ffmpeg.log"
    provider = StandInProvider(READ_ALL, 3, path=str(tmp_path / "out.mp4"), log_path=str(log_path))

    with caplog.at_level(logging.ERROR):
        return_code = asyncio.run(_feed(provider, [b"frame"]))

    assert return_code == 3
    assert "ffmpeg encountered an error" in caplog.text
    assert str(log_path) in caplog.text


def test_encoder_exiting_early_does_not_stop_capture(tmp_path):
    """Frames written after the encoder has gone are dropped, not raised."""
    provider = StandInProvider(
        EXIT_AT_ONCE, 1, path=str(tmp_path / "out.mp4"), log_path=str(tmp_path / "ffmpeg.log")
    )
    frames = [b"x" * 256_000 for _ in range(8)]

    return_code = asyncio.run(_feed(provider, frames))

    assert return_code == 1
    assert provider.frames_dropped >= 1
    assert provider.frames_written + provider.frames_dropped == len(frames)


def test_missing_binary_raises(tmp_path):
    provider = FfmpegOutputProvider(
        str(tmp_path / "out.mp4"),
        log_path=str(tmp_path / "ffmpeg.log"),
        binary="definitely-not-an-ffmpeg-binary",
    )

    with pytest.raises(EncoderProcessFailure, match="not found"):
        asyncio.run(provider.start())


def test_write_before_start_raises():
    provider = FfmpegOutputProvider()

    with pytest.raises(RuntimeError, match="not been started"):
        asyncio.run(provider.write(b"frame"))


def test_finish_without_start_is_noop():
    assert asyncio.run(FfmpegOutputProvider().finish()) is None
