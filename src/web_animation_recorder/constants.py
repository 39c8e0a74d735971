"""Global constants for the application."""

# Recording settings
DEFAULT_FPS = 30  # Default frames per second for the video
DEFAULT_INDEX = 0  # Animation group recorded when none is chosen

# Output artifacts
OUTPUT_PATH = "output.mp4"  # Encoded video
LOG_PATH = "ffmpeg.log"  # Merged encoder stdout/stderr
FFMPEG_BINARY = "ffmpeg"

# Timeouts and polling, in seconds unless noted
SELECTOR_TIMEOUT_MS = 10_000  # Wait for the container to become visible
QUIESCENCE_WINDOW = 2.0  # No new animation for this long ends discovery
POLL_INTERVAL = 1.0  # How often discovery checks for quiescence
PROGRESS_INTERVAL = 3.0  # Wall-clock seconds between progress lines

# Encoder settings
VIDEO_CODEC = "libx264"
VIDEO_PROFILE = "high"
VIDEO_CRF = 20
PIXEL_FORMAT = "yuv420p"
