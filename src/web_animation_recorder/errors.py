"""Exception types raised by the recorder."""


class RecorderError(Exception):
    """Base exception for recording failures with user-friendly messages."""
    pass


class SelectorTimeout(RecorderError):
    """The container selector never became visible."""

    def __init__(self, selector: str, timeout_ms: int):
        super().__init__(
            f"Selector '{selector}' did not become visible within {timeout_ms / 1000:g}s"
        )
        self.selector = selector
        self.timeout_ms = timeout_ms


class InvalidGroupIndex(RecorderError):
    """The requested animation group index is out of range."""

    def __init__(self, index: int, group_count: int):
        super().__init__(
            f"Animation index {index} is out of range: "
            f"{group_count} animation group(s) found"
        )
        self.index = index
        self.group_count = group_count


class NodeResolutionFailure(RecorderError):
    """A DOM node could not be resolved to a runtime object."""
    pass


class EncoderProcessFailure(RecorderError):
    """The external encoder could not be started."""
    pass


class EmptyBoundsError(RecorderError):
    """The container never had a rendered box during the bounds pass."""
    pass


class FrameSizeMismatch(RecorderError):
    """A captured frame does not match the recording bounds."""
    pass
