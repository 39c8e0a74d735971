"""Timeline data model: animations, animation groups and bounds."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AnimationSource:
    """Timing and target of an animation's effect."""
    delay: float
    duration: float
    backend_node_id: int | None = None


@dataclass(frozen=True, slots=True)
class Animation:
    """One running animation instance reported by the page."""
    id: str
    start_time: float
    source: AnimationSource

    @classmethod
    def from_protocol(cls, payload: dict[str, Any]) -> "Animation":
        """Build an Animation from an ``Animation.Animation`` protocol object."""
        source = payload.get("source") or {}
        return cls(
            id=payload["id"],
            start_time=payload["startTime"],
            source=AnimationSource(
                delay=source.get("delay", 0),
                duration=source.get("duration", 0),
                backend_node_id=source.get("backendNodeId"),
            ),
        )


@dataclass(slots=True)
class AnimationGroup:
    """Animations that started at the same instant, recorded as one unit."""
    start_time: float
    members: list[Animation] = field(default_factory=list)

    def add(self, animation: Animation) -> None:
        if animation.start_time != self.start_time:
            raise ValueError(
                f"Animation {animation.id} starts at {animation.start_time}, "
                f"group starts at {self.start_time}"
            )
        self.members.append(animation)

    @property
    def animation_ids(self) -> list[str]:
        return [animation.id for animation in self.members]


@dataclass(frozen=True, slots=True)
class Bounds:
    """Recording rectangle in CSS pixels."""
    x: int
    y: int
    width: int
    height: int

    def as_clip(self) -> dict[str, float]:
        """Return the rectangle in the shape screenshot clipping expects."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}
