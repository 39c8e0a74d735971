"""Runtime configuration for a recording run."""

import os
from dataclasses import dataclass

from .constants import (
    DEFAULT_FPS,
    DEFAULT_INDEX,
    FFMPEG_BINARY,
    LOG_PATH,
    OUTPUT_PATH,
    POLL_INTERVAL,
    PROGRESS_INTERVAL,
    QUIESCENCE_WINDOW,
    SELECTOR_TIMEOUT_MS,
)

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RecorderConfig:
    """Everything one recording run needs to know."""

    selector: str
    address: str
    fps: int = DEFAULT_FPS
    index: int = DEFAULT_INDEX
    output_path: str = OUTPUT_PATH
    log_path: str = LOG_PATH
    selector_timeout_ms: int = SELECTOR_TIMEOUT_MS
    quiescence_window: float = QUIESCENCE_WINDOW
    poll_interval: float = POLL_INTERVAL
    progress_interval: float = PROGRESS_INTERVAL
    headless: bool = True
    ffmpeg_binary: str = FFMPEG_BINARY

    @property
    def frame_interval(self) -> float:
        """Milliseconds of animation time between two sampled frames."""
        return 1000 / self.fps

    @classmethod
    def from_env(cls, selector: str, address: str, fps: int, index: int) -> "RecorderConfig":
        """
        Build a config from CLI values plus environment overrides.

        ``RECORDER_FFMPEG_BINARY`` replaces the encoder executable and
        ``RECORDER_HEADLESS=0`` shows the browser window.
        """
        headless_env = os.getenv("RECORDER_HEADLESS")
        headless = True
        if headless_env is not None:
            headless = headless_env.strip().lower() not in _FALSE_VALUES

        return cls(
            selector=selector,
            address=address,
            fps=fps,
            index=index,
            headless=headless,
            ffmpeg_binary=os.getenv("RECORDER_FFMPEG_BINARY") or FFMPEG_BINARY,
        )
