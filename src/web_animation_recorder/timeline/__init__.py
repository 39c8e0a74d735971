"""Animation timeline discovery, measurement and sampling."""

from .bounds import BoundsAccumulator, BoundsCalculator, round_up_to_even
from .containment import ContainmentFilter
from .discovery import AnimationDiscovery, DiscoveryState, select_group
from .frame_sampler import FrameSampler, check_frame_size
from .models import Animation, AnimationGroup, AnimationSource, Bounds
from .sampling import count_samples, group_duration, iter_sample_times

__all__ = [
    "Animation",
    "AnimationDiscovery",
    "AnimationGroup",
    "AnimationSource",
    "Bounds",
    "BoundsAccumulator",
    "BoundsCalculator",
    "ContainmentFilter",
    "DiscoveryState",
    "FrameSampler",
    "check_frame_size",
    "count_samples",
    "group_duration",
    "iter_sample_times",
    "round_up_to_even",
    "select_group",
]
