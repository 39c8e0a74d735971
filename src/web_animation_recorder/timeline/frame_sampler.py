"""Capture pass: one clipped image per sampled instant of a group."""

from io import BytesIO
from typing import TYPE_CHECKING, AsyncIterator

from PIL import Image

from ..constants import DEFAULT_FPS
from ..errors import FrameSizeMismatch
from ..progress import ProgressReporter
from .models import AnimationGroup, Bounds
from .sampling import group_duration, iter_sample_times

if TYPE_CHECKING:
    from ..browser.session import RecordingSession


def check_frame_size(frame: bytes, bounds: Bounds) -> None:
    """Raise FrameSizeMismatch unless the PNG is exactly the bounds' size."""
    with Image.open(BytesIO(frame)) as image:
        size = image.size
    expected = (bounds.width, bounds.height)
    if size != expected:
        raise FrameSizeMismatch(
            f"Captured frame is {size[0]}x{size[1]}, expected {expected[0]}x{expected[1]}. "
            "Is the animation larger than the browser viewport?"
        )


class FrameSampler:
    """Seeks a group frame by frame and yields background-free PNG captures."""

    def __init__(self, session: "RecordingSession", bounds: Bounds, fps: int = DEFAULT_FPS):
        self.session = session
        self.bounds = bounds
        self.fps = fps

    async def iter_frames(
        self,
        group: AnimationGroup,
        progress: ProgressReporter | None = None,
    ) -> AsyncIterator[bytes]:
        """Yield frames in timeline order, frame ``n`` taken at ``n * 1000 / fps`` ms."""
        duration = group_duration(group)
        animation_ids = group.animation_ids
        for current_time in iter_sample_times(duration, self.fps):
            if progress is not None:
                progress.update(current_time)
            await self.session.animation.seek_animations(animation_ids, current_time)
            frame = await self.session.capture(self.bounds)
            check_frame_size(frame, self.bounds)
            yield frame
