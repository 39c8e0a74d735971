"""Output sinks for captured frames."""

from .base import OutputSink
from .ffmpeg_provider import FfmpegOutputProvider

__all__ = [
    "FfmpegOutputProvider",
    "OutputSink",
]
