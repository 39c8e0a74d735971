"""Sampling schedule shared by the bounds and capture passes."""

from typing import Iterator

from .models import AnimationGroup


def group_duration(group: AnimationGroup) -> float:
    """Length of a group's timeline: the latest ``delay + duration`` of its members."""
    return max(
        (member.source.delay + member.source.duration for member in group.members),
        default=0,
    )


def iter_sample_times(duration_ms: float, fps: int) -> Iterator[float]:
    """
    Yield the timeline positions to sample, in milliseconds.

    Frame ``n`` is always sampled at ``n * (1000 / fps)``, so the schedule
    never drifts with capture speed. Sampling stops before ``duration_ms``.

    Args:
        duration_ms: Length of the timeline
        fps: Frames per second of the output

    Yields:
        Sample instants in strictly increasing order
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")

    interval = 1000 / fps
    frame = 0
    while (current_time := frame * interval) < duration_ms:
        yield current_time
        frame += 1


def count_samples(duration_ms: float, fps: int) -> int:
    """Number of instants ``iter_sample_times`` yields."""
    return sum(1 for _ in iter_sample_times(duration_ms, fps))
