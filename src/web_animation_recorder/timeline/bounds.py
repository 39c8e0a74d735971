"""Bounds pass: find the rectangle that frames a group's whole timeline."""

import logging
import math
from typing import TYPE_CHECKING, Mapping

from rich.console import Console

from ..constants import DEFAULT_FPS, PROGRESS_INTERVAL
from ..errors import EmptyBoundsError
from ..progress import ProgressReporter
from .models import AnimationGroup, Bounds
from .sampling import group_duration, iter_sample_times

if TYPE_CHECKING:
    from ..browser.session import RecordingSession

logger = logging.getLogger(__name__)


def round_up_to_even(value: float) -> int:
    """Smallest even integer not below ``value`` (yuv420p needs even sizes)."""
    size = math.ceil(value)
    return size + size % 2


class BoundsAccumulator:
    """Folds per-instant boxes into one recording rectangle."""

    def __init__(self) -> None:
        self.x = math.inf
        self.y = math.inf
        self.width = 0.0
        self.height = 0.0
        self.samples = 0

    def add(self, box: Mapping[str, float]) -> None:
        """Fold one box: top-left takes the minimum, size takes the maximum."""
        self.x = min(self.x, box["x"])
        self.y = min(self.y, box["y"])
        self.width = max(self.width, box["width"])
        self.height = max(self.height, box["height"])
        self.samples += 1

    def result(self) -> Bounds:
        if self.samples == 0:
            raise EmptyBoundsError("The container was never rendered while measuring bounds")
        # Nothing above or left of the page origin can be captured. Keeping the
        # size while moving the corner to 0 still covers the far edges.
        return Bounds(
            x=max(0, math.floor(self.x)),
            y=max(0, math.floor(self.y)),
            width=round_up_to_even(self.width),
            height=round_up_to_even(self.height),
        )


class BoundsCalculator:
    """
    Scrubs a group across its timeline and measures the container at each step.

    CSS animations can move and resize the container, so one frame's box is
    not enough: the recording rectangle covers every sampled instant. This
    pass only reads geometry and captures no images.
    """

    def __init__(
        self,
        session: "RecordingSession",
        selector: str,
        fps: int = DEFAULT_FPS,
        console: Console | None = None,
        progress_interval: float = PROGRESS_INTERVAL,
    ):
        self.session = session
        self.selector = selector
        self.fps = fps
        self.console = console
        self.progress_interval = progress_interval

    async def measure(self, group: AnimationGroup) -> Bounds:
        duration = group_duration(group)
        animation_ids = group.animation_ids
        element = await self.session.container_element(self.selector)
        accumulator = BoundsAccumulator()

        async with ProgressReporter(
            duration,
            label="Measuring bounds",
            console=self.console,
            interval=self.progress_interval,
        ) as progress:
            for current_time in iter_sample_times(duration, self.fps):
                progress.update(current_time)
                await self.session.animation.seek_animations(animation_ids, current_time)
                box = await element.bounding_box()
                if box is None:
                    logger.debug("Container not rendered at %.2fms", current_time)
                    continue
                accumulator.add(box)

        bounds = accumulator.result()
        logger.info(
            "Recording area %dx%d at (%d, %d)",
            bounds.width, bounds.height, bounds.x, bounds.y,
        )
        return bounds
