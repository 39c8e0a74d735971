"""Page automation surface used by the recorder."""

from .protocol import AnimationDomain, DomDomain, RuntimeDomain
from .session import RecordingSession

__all__ = [
    "AnimationDomain",
    "DomDomain",
    "RecordingSession",
    "RuntimeDomain",
]
